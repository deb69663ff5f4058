"""Response builders shared by the file-serving routes."""

from fastapi.responses import FileResponse

from docpreview.services.retrieval_service import NO_CACHE_HEADERS, ResolvedFile


def no_cache_file_response(
    resolved: ResolvedFile,
    download_name: str | None = None,
) -> FileResponse:
    """Stream a stored file with its extension-derived type and caching disabled."""
    return FileResponse(
        resolved.path,
        media_type=resolved.content_type,
        filename=download_name or resolved.name,
        content_disposition_type="attachment" if download_name else "inline",
        headers=dict(NO_CACHE_HEADERS),
    )
