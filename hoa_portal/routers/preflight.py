# hoa_portal/routers/preflight.py
"""
Explicit OPTIONS answer for the function endpoints. Browser preflights are
handled by CORSMiddleware before they get here; this covers clients that
send OPTIONS without an Origin header.
"""

from fastapi.responses import PlainTextResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def preflight_ok():
    return PlainTextResponse("ok", headers=CORS_HEADERS)
