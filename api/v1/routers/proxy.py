import re

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from core.config import settings
from services import proxy_client
from services.proxy_client import ProxyError
from utils.logger import logger

router = APIRouter()

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

IMAGE_URL = re.compile(
    r"\.(%s)(\?.*)?$" % "|".join(settings.IMAGE_PROXY_EXTENSIONS),
    re.IGNORECASE,
)

def _cors(methods: str) -> dict:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }

@router.api_route("/img", methods=ALL_METHODS)
async def image_proxy(request: Request):
    """
    Fetch a remote image server-side so the browser is not blocked by CORS
    """
    headers = _cors("GET, OPTIONS")
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)
    if request.method != "GET":
        return Response(status_code=405, headers=headers)

    url = request.query_params.get("url")
    if not url:
        return JSONResponse({"error": "Missing url param"}, status_code=400, headers=headers)
    if not IMAGE_URL.search(url):
        return JSONResponse({"error": "Only image URLs allowed"}, status_code=400, headers=headers)

    try:
        upstream = await proxy_client.fetch_image(url)
    except ProxyError as e:
        return JSONResponse({"error": f"Proxy error: {e}"}, status_code=500, headers=headers)

    if not upstream.ok:
        logger.warning(f"IMAGE PROXY: {url} answered {upstream.status}")
        return JSONResponse({"error": "Failed to fetch image"}, status_code=upstream.status, headers=headers)

    headers["Cache-Control"] = f"public, max-age={settings.IMAGE_PROXY_CACHE_SECONDS}"
    return Response(
        content=upstream.body,
        media_type=upstream.content_type or "image/jpeg",
        headers=headers,
    )

@router.api_route("/llm", methods=ALL_METHODS)
async def llm_proxy(request: Request):
    """
    Forward a chat request to the LLM API; the key never reaches the browser
    """
    headers = _cors("POST, OPTIONS")
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)
    if request.method != "POST":
        return JSONResponse({"error": "Method not allowed"}, status_code=405, headers=headers)

    if not settings.LLM_API_KEY:
        logger.error("LLM PROXY: LLM_API_KEY is not configured")
        return JSONResponse({"error": "LLM_API_KEY is not configured"}, status_code=500, headers=headers)

    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse({"error": "Body must be JSON"}, status_code=400, headers=headers)

    try:
        upstream = await proxy_client.forward_llm(payload)
    except ProxyError as e:
        return JSONResponse({"error": f"Proxy error: {e}"}, status_code=500, headers=headers)

    if not upstream.ok:
        logger.warning(f"LLM PROXY: upstream answered {upstream.status}")
    return JSONResponse(upstream.body, status_code=upstream.status, headers=headers)
