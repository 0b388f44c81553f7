"""
Shared-password gate for the API and the login form.
"""
import hmac
import html
import logging
from typing import Any, Callable, Dict, Optional
from urllib.parse import parse_qs, quote, unquote

from kapture.config import AUTH_COOKIE_NAME, Settings, configure_logging, load_settings
from kapture.utils.request_helpers import get_body, get_cookies, get_header
from kapture.utils.response_helpers import create_error_response, create_html_response, create_redirect_response

logger = logging.getLogger(__name__)

LOGIN_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sign in - Kapture</title>
  <style>
    body {{ margin:0; font-family:sans-serif; display:flex; justify-content:center; align-items:center;
           min-height:100vh; background:linear-gradient(to bottom right, #4CAF50, #2196F3); }}
    .login-container {{ background:rgba(255,255,255,0.9); padding:2.5rem; border-radius:.75rem;
                       width:100%; max-width:450px; text-align:center; color:#333; }}
    h1 {{ font-size:2rem; color:#3F51B5; margin-bottom:1.5rem; }}
    .error-message {{ color:#F44336; margin-bottom:1.5rem; font-weight:bold; }}
    .form-group {{ margin-bottom:1.5rem; text-align:left; }}
    label {{ display:block; margin-bottom:.75rem; color:#607D8B; font-weight:bold; }}
    input[type="password"] {{ width:100%; padding:.8rem; border:1px solid #B0BEC5; border-radius:.5rem;
                             font-size:1.1rem; box-sizing:border-box; }}
    button {{ width:100%; padding:.9rem; background:linear-gradient(to right, #2196F3, #4CAF50); color:#fff;
             font-weight:bold; border:none; border-radius:.5rem; cursor:pointer; font-size:1.2rem; }}
  </style>
</head>
<body>
  <div class="login-container">
    <h1>Kapture</h1>
    {error}
    <form method="POST" action="/">
      <div class="form-group">
        <label for="password">Password:</label>
        <input type="password" id="password" name="password" required>
      </div>
      <button type="submit">Sign in</button>
    </form>
  </div>
</body>
</html>"""


def render_login_page(error_message: str = '') -> str:
    error = f'<p class="error-message">{html.escape(error_message)}</p>' if error_message else ''
    return LOGIN_PAGE_TEMPLATE.format(error=error)


def login_page_response(error_message: str = '') -> Dict[str, Any]:
    return create_html_response(401, render_login_page(error_message))


def password_matches(candidate: Optional[str], settings: Settings) -> bool:
    if candidate is None:
        return False
    return hmac.compare_digest(candidate.encode('utf-8'), settings.auth_password.encode('utf-8'))


def is_authenticated(event: Dict[str, Any], settings: Settings) -> bool:
    """True when the gate is disabled or the password cookie matches."""
    if not settings.auth_enabled:
        return True
    cookie = get_cookies(event).get(AUTH_COOKIE_NAME)
    return password_matches(unquote(cookie) if cookie is not None else None, settings)


def handle_login(event: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """
    Handle the login form POST.

    Returns:
        302 with the auth cookie on success, 401 login page on a wrong
        password, 400 when the body is not a urlencoded form
    """
    content_type = get_header(event, 'Content-Type') or ''
    if 'application/x-www-form-urlencoded' not in content_type:
        return create_html_response(400, 'Unsupported Content-Type')

    try:
        form = parse_qs(get_body(event), keep_blank_values=True)
    except (UnicodeDecodeError, ValueError):
        return create_html_response(400, 'Invalid form data')

    entered = (form.get('password') or [None])[0]
    if not password_matches(entered, settings):
        logger.warning("Rejected login attempt")
        return login_page_response('Wrong password, please try again.')

    cookie = (
        f"{AUTH_COOKIE_NAME}={quote(settings.auth_password, safe='')}; "
        "Path=/; HttpOnly; Secure; SameSite=Strict"
    )
    return create_redirect_response('/', headers={'Set-Cookie': cookie})


Handler = Callable[[Dict[str, Any], Any, Settings], Dict[str, Any]]


def run_authenticated(
    handler: Handler,
    event: Dict[str, Any],
    context: Any,
    settings: Optional[Settings] = None
) -> Dict[str, Any]:
    """Load settings, apply the password gate, then invoke handler."""
    configure_logging()
    try:
        settings = settings or load_settings()
    except Exception as e:
        logger.exception("Could not load settings")
        return create_error_response(500, 'Internal Server Error', 'INTERNAL_ERROR', str(e))
    if not settings.auth_enabled:
        logger.warning("AUTH_PASSWORD is not set; requests are not protected")
    elif not is_authenticated(event, settings):
        return login_page_response()
    return handler(event, context, settings)
