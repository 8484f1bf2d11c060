"""HTML pages served at the web root."""

import html
import json
from typing import Optional


LOGIN_PAGE = """<!DOCTYPE html>
<html>
    <head>
        <meta charset="utf-8">
        <title>Crusty Server</title>
    </head>
    <body>
        <h1>Crusty Server</h1>
        {notice}
        <form method="get" action="/">
            <label for="token">Access token</label>
            <input type="password" id="token" name="token" autofocus>
            <button type="submit">View status</button>
        </form>
    </body>
</html>
"""

DASHBOARD_PAGE = """<!DOCTYPE html>
<html>
    <head>
        <meta charset="utf-8">
        <title>Crusty Server - Status</title>
    </head>
    <body>
        <h1>System Status</h1>
        <p>Signed in as {username}</p>
        <pre id="status">Loading...</pre>
        <script>
            const token = {token_json};
            async function refresh() {{
                const resp = await fetch("/api/status?token=" + encodeURIComponent(token));
                document.getElementById("status").textContent = await resp.text();
            }}
            refresh();
            setInterval(refresh, 5000);
        </script>
    </body>
</html>
"""


def login_page(notice: Optional[str] = None) -> str:
    """Token prompt shown to unauthenticated visitors."""
    block = f'<p class="error">{html.escape(notice)}</p>' if notice else ""
    return LOGIN_PAGE.format(notice=block)


def dashboard_page(username: str, token: str) -> str:
    """Status shell that polls /api/status with the visitor's token."""
    # json.dumps does not escape "</", which would end the script element
    token_json = json.dumps(token).replace("</", "<\\/")
    return DASHBOARD_PAGE.format(username=html.escape(username), token_json=token_json)
