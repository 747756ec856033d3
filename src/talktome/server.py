"""MCP server exposing talktome speech synthesis as a tool.

Clients call ``speak_text`` over stdio; each call goes through the same
cache-aside path as ``talktome say``.
"""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from . import __version__
from .config import TalkToMeConfig, load_config
from .core import speak_text

logger = logging.getLogger(__name__)

SERVER_NAME = "talktome"
MAX_TEXT_LENGTH = 4096

SPEAK_TEXT_DESCRIPTION = (
    "Convert text to speech using OpenAI TTS with MP3 caching. "
    "Voices: alloy, echo, fable, onyx, nova, shimmer. Models: tts-1, tts-1-hd."
)


async def handle_speak_text(
    text: str,
    voice: str | None = None,
    model: str | None = None,
    save_only: bool = False,
    output_path: str | None = None,
    config: TalkToMeConfig | None = None,
) -> dict[str, Any]:
    """Run one speak_text tool call.

    Failures are reported in the result instead of raised, so the client
    always gets a response it can show.

    Returns:
        ``{"success": True, "audioPath", "cached", "message"}`` or
        ``{"success": False, "error"}``
    """
    config = config or load_config()
    voice_name = voice or str(config.tts.voice)

    try:
        if len(text) > MAX_TEXT_LENGTH:
            raise ValueError(
                f"Text is too long ({len(text)} characters, max {MAX_TEXT_LENGTH})"
            )

        logger.info(f"Processing TTS request ({len(text)} chars, voice {voice_name})")
        result = await speak_text(
            text,
            voice=voice,
            model=model,
            output_file=output_path,
            cache=config.cache.enabled,
            save_only=save_only,
            config=config,
        )
    except Exception as e:
        logger.error(f"Error processing TTS request: {e}")
        return {"success": False, "error": str(e)}

    if result.cached:
        message = f"Text converted to speech using cached audio ({voice_name} voice)"
    else:
        message = f"Text converted to speech and cached ({voice_name} voice)"

    return {
        "success": True,
        "audioPath": str(result.audio_path) if result.audio_path else None,
        "cached": result.cached,
        "message": message,
    }


def create_server(config: TalkToMeConfig | None = None) -> FastMCP:
    """Build the MCP server with the speak_text tool registered."""
    server = FastMCP(SERVER_NAME)

    @server.tool(name="speak_text", description=SPEAK_TEXT_DESCRIPTION)
    async def speak_text_tool(
        text: str,
        voice: str | None = None,
        model: str | None = None,
        save_only: bool = False,
        output_path: str | None = None,
    ) -> str:
        result = await handle_speak_text(
            text,
            voice=voice,
            model=model,
            save_only=save_only,
            output_path=output_path,
            config=config,
        )
        return json.dumps(result)

    logger.debug(f"MCP server {SERVER_NAME} {__version__} created")
    return server
