# embed/__init__.py
import logging

import azure.functions as func

from shared.config import Settings, get_settings
from shared.renderer import render_embed_html
from shared.resolver import resolve_embed_view


def handle(req: func.HttpRequest, settings: Settings) -> func.HttpResponse:
    """
    Route: /embed?text=&img=&color=&title=&siteName=&avatarType=&avatarUrl=&avatarWidth=&avatarHeight=
    Returns the link-preview HTML document.
    """
    try:
        view = resolve_embed_view(req.params, settings)
        html = render_embed_html(view)
        logging.info(
            "[Embed] rendered card=%s title=%s site_name=%s",
            view.card_type, view.title.mode.value, view.site_name.mode.value,
        )
        return func.HttpResponse(html, status_code=200, mimetype="text/html", charset="utf-8")

    except Exception:
        logging.exception("[Embed] Unhandled error")
        return func.HttpResponse("Embed error", status_code=500, mimetype="text/plain")


def main(req: func.HttpRequest) -> func.HttpResponse:
    return handle(req, get_settings())
