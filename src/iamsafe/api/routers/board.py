"""Board Router - status listing, submission and admin deletion."""

import logging
import time
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from iamsafe.api.deps import get_admin_guard, get_board_service
from iamsafe.api.metrics import record_deletion, record_listing, record_submission
from iamsafe.api.middleware.rate_limiter import limiter
from iamsafe.api.middleware.request_logging import get_client_ip
from iamsafe.api.templates import templates
from iamsafe.core.config import settings
from iamsafe.core.errors import (
    AuthorizationError,
    BoardError,
    StoreUnavailableError,
    SubmissionValidationError,
)
from iamsafe.i18n.messages import MESSAGES, STATUS_LABELS, resolve_language
from iamsafe.services.admin_auth import (
    CSRF_FORM_FIELD,
    SESSION_COOKIE_NAME,
    AdminGuard,
    add_csrf_cookie,
    add_session_cookie,
    bearer_token,
    clear_admin_cookies,
    get_csrf_token,
    validate_csrf_token,
)
from iamsafe.services.board import REQUIRED_FIELDS, StatusBoardService

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_pos_int(value: str | None, default: int, *, min_v: int = 1) -> int:
    try:
        x = int(value) if value is not None else default
    except ValueError:
        x = default
    return max(x, min_v)


def _current_lang(lang: str | None) -> str:
    return resolve_language(lang, settings.DEFAULT_LANG)


def board_url(
    *,
    lang: str,
    page: int | None = None,
    query: str | None = None,
    admin_token: str | None = None,
) -> str:
    """Build a link back to the board, keeping search and admin state."""
    params: dict[str, str | int] = {}
    if page is not None:
        params["p"] = page
    params["lang"] = lang
    if query:
        params["q"] = query
    if admin_token:
        params["admin"] = admin_token
    return "/?" + urlencode(params)


def _error_response(exc: BoardError, lang: str) -> PlainTextResponse:
    return PlainTextResponse(exc.render(MESSAGES[lang]), status_code=exc.status_code)


@router.get("/admin/logout")
async def admin_logout(lang: str | None = None):
    """Drop the admin session cookie."""
    response = RedirectResponse(url=board_url(lang=_current_lang(lang)), status_code=303)
    return clear_admin_cookies(response)


@router.post("/update")
@limiter.limit(settings.SUBMIT_RATE_LIMIT)
async def submit_status(
    request: Request,
    name: str = Form(""),
    id_number: str = Form(""),
    location: str = Form(""),
    status: str = Form(""),
    message: str = Form(""),
    form_lang: str = Form(""),
    lang: str | None = None,
    service: StatusBoardService = Depends(get_board_service),
):
    """Create a status record and redirect back to the board."""
    current_lang = _current_lang(lang)
    try:
        await run_in_threadpool(
            service.submit,
            name=name,
            id_number=id_number,
            location=location,
            status=status,
            message=message,
            ip_address=get_client_ip(request),
        )
    except SubmissionValidationError as e:
        record_submission("invalid")
        return _error_response(e, current_lang)
    except StoreUnavailableError as e:
        record_submission("error")
        return _error_response(e, current_lang)

    record_submission("created")
    redirect_lang = resolve_language(form_lang, current_lang)
    return RedirectResponse(url=board_url(lang=redirect_lang), status_code=302)


@router.post("/delete")
async def delete_status(
    request: Request,
    record_id: str = Form("", alias="id"),
    admin_token: str = Form(""),
    csrf_token: str = Form("", alias=CSRF_FORM_FIELD),
    form_lang: str = Form("", alias="lang"),
    service: StatusBoardService = Depends(get_board_service),
    guard: AdminGuard = Depends(get_admin_guard),
):
    """Delete one record. Authorization is checked here, never inferred from the page."""
    current_lang = _current_lang(form_lang or request.query_params.get("lang"))
    try:
        method = guard.authorize(
            form_token=admin_token,
            bearer=bearer_token(request.headers.get("authorization")),
            session_token=request.cookies.get(SESSION_COOKIE_NAME),
            csrf_valid=validate_csrf_token(request, csrf_token),
        )
        logger.info(f"Delete authorized via {method} credential")
        changes = await run_in_threadpool(service.delete, record_id)
    except AuthorizationError as e:
        record_deletion("unauthorized")
        return _error_response(e, current_lang)
    except StoreUnavailableError as e:
        record_deletion("error")
        return _error_response(e, current_lang)
    except BoardError as e:
        record_deletion("invalid")
        return _error_response(e, current_lang)

    record_deletion("deleted" if changes else "noop")
    # Re-attach a form-supplied token so the admin stays in admin mode
    redirect_token = admin_token if method == "form" else None
    return RedirectResponse(
        url=board_url(lang=current_lang, admin_token=redirect_token),
        status_code=302,
    )


@router.get("/", response_class=HTMLResponse)
@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST"],
    response_class=HTMLResponse,
    include_in_schema=False,
)
async def board_page(
    request: Request,
    q: str | None = None,
    p: str | None = None,
    lang: str | None = None,
    admin: str | None = None,
    service: StatusBoardService = Depends(get_board_service),
    guard: AdminGuard = Depends(get_admin_guard),
):
    """Status board page. Every path without its own route lands here."""
    started_at = time.perf_counter()
    current_lang = _current_lang(lang)
    msg = MESSAGES[current_lang]

    url_token_valid = guard.token_matches(admin)
    is_admin = guard.is_admin_view(admin, request.cookies.get(SESSION_COOKIE_NAME))
    # Only echo a token that is actually the admin token
    admin_token = admin if url_token_valid else ""

    page_number = _parse_pos_int(p, 1)
    board = await run_in_threadpool(service.list_page, q, page_number)
    record_listing(
        "search" if board.query else "browse", time.perf_counter() - started_at
    )

    csrf_token = get_csrf_token(request) if is_admin else ""

    resp = templates.TemplateResponse(
        request,
        "board.html",
        {
            "request": request,
            "lang": current_lang,
            "languages": {code: MESSAGES[code]["lang_name"] for code in MESSAGES},
            "msg": msg,
            "event": settings.EVENT_NAME,
            "board": board,
            "error": msg[board.error] if board.error else None,
            "status_labels": STATUS_LABELS,
            "required_fields": REQUIRED_FIELDS,
            "is_admin": is_admin,
            "admin_token": admin_token,
            "csrf_token": csrf_token,
            "csrf_field": CSRF_FORM_FIELD,
            "prev_url": board_url(
                lang=current_lang,
                page=board.page - 1,
                query=board.query,
                admin_token=admin_token,
            ),
            "next_url": board_url(
                lang=current_lang,
                page=board.page + 1,
                query=board.query,
                admin_token=admin_token,
            ),
            "lang_urls": {
                code: board_url(lang=code, query=board.query, admin_token=admin_token)
                for code in MESSAGES
            },
        },
    )

    if is_admin:
        add_csrf_cookie(resp, csrf_token)
        if url_token_valid:
            session = guard.create_session()
            if session:
                add_session_cookie(resp, session)

    return resp
