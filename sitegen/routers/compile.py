import base64
import io
import json
import logging
import zipfile

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from sitegen.errors import CompilationError, DomainNotFoundError
from sitegen.models.compile_request import CompileRequest, SiteTitleRequest
from sitegen.models.compile_response import CompileResponse, SiteTitleResponse
from sitegen.models.validation import ValidateRequest, ValidationReport
from sitegen.services.generator import compile_site
from sitegen.services.markdown_renderer import HostnameCache
from sitegen.services.site_title import extract_site_title
from sitegen.services.validator import validate_pages

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

# Portfolio hostnames change rarely; one cache serves every request.
portfolio_cache = HostnameCache()


@router.post(
    "/compile",
    response_model=CompileResponse,
    summary="Compile a domain into a static site",
    description=(
        "Turns the supplied domain bundle (articles or page definitions plus "
        "disclosure, datasets and citations) into the complete static file set: "
        "HTML pages, `styles.css`, `sitemap.xml`, `robots.txt`, `_headers`, "
        "`favicon.svg` and embeddable widget pages.\n\n"
        "Pass `?format=zip` to download the files as one archive."
    ),
)
@limiter.limit("10/minute")
async def compile_endpoint(
    request: Request,
    body: CompileRequest,
    format: str = Query(default="json", description="Output format: 'json' or 'zip'."),
) -> CompileResponse | StreamingResponse:
    """Compile *body* into its site files."""
    logger.info(
        "Compile request received",
        extra={
            "domain": body.domain.domain if body.domain else None,
            "articles": len(body.articles),
            "pages": len(body.page_definitions),
        },
    )

    try:
        result = await compile_site(body, cache=portfolio_cache)
    except DomainNotFoundError as exc:
        logger.warning("Compile rejected – %s", exc)
        raise HTTPException(status_code=404, detail=str(exc))
    except CompilationError as exc:
        logger.error("Compilation failed – %s", exc)
        raise HTTPException(status_code=422, detail=str(exc))

    if format == "zip":
        return _build_zip_response(result)
    return result


def _build_zip_response(result: CompileResponse) -> StreamingResponse:
    """Return the compiled site as a ZIP archive.

    The archive holds every generated file at its site-relative path plus a
    ``manifest.json`` listing them.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        manifest = {
            "domain": result.domain,
            "mode": result.mode,
            "file_count": result.file_count,
            "files": [f.path for f in result.files],
        }
        zf.writestr("manifest.json", json.dumps(manifest, ensure_ascii=False, indent=2))
        for file in result.files:
            data = base64.b64decode(file.content) if file.is_binary else file.content
            zf.writestr(file.path, data)

    buffer.seek(0)
    filename = f"{result.domain.replace('.', '-')}-site.zip"
    return StreamingResponse(
        buffer,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/validate",
    response_model=ValidationReport,
    summary="Preflight-check a set of page definitions",
    description=(
        "Audits block pages for broken internal links, empty required block "
        "fields, placeholder text and missing compliance pages.  `ready` is "
        "true when no error-severity issue was found."
    ),
)
@limiter.limit("10/minute")
async def validate_endpoint(request: Request, body: ValidateRequest) -> ValidationReport:
    return validate_pages(body.domain, body.pages, body.niche)


@router.post(
    "/site-title",
    response_model=SiteTitleResponse,
    summary="Derive a readable site title from a hostname",
)
@limiter.limit("10/minute")
async def site_title_endpoint(request: Request, body: SiteTitleRequest) -> SiteTitleResponse:
    return SiteTitleResponse(hostname=body.hostname, title=extract_site_title(body.hostname))
