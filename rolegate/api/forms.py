"""HTML served by the registration and login pages."""

from html import escape

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{title}</title>
</head>
<body>
  <h1>{title}</h1>
  {body}
</body>
</html>
"""

_CREDENTIALS_FORM = """<form method="post" action="{action}">
    <label>Login <input type="text" name="login" required></label>
    <label>Password <input type="password" name="password" required></label>
    <button type="submit">{submit}</button>
  </form>
  <p><a href="{other_href}">{other_label}</a></p>"""


def _credentials_page(title: str, action: str, submit: str, other_href: str, other_label: str) -> str:
    body = _CREDENTIALS_FORM.format(
        action=action,
        submit=submit,
        other_href=other_href,
        other_label=other_label,
    )
    return _PAGE.format(title=title, body=body)


REGISTER_PAGE = _credentials_page("Register", "/register", "Register", "/login", "Log in")
LOGIN_PAGE = _credentials_page("Log in", "/login", "Log in", "/register", "Register")


def profile_greeting(login: str) -> str:
    return f'Welcome, {escape(login)}! <a href="/logout">Log out</a>'
