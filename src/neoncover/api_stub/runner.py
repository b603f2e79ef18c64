from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from dotenv import load_dotenv

load_dotenv()  # Load .env file

from neoncover.app.settings import load_settings
from neoncover.app.logging import setup_logging
from neoncover.session.session_manager import EditorSession

PathLike = Union[str, Path]


async def _compose_and_export(
    session: EditorSession,
    *,
    title: Optional[str],
    background_path: Optional[PathLike],
    image_paths: Sequence[PathLike],
    out_dir: Optional[PathLike],
) -> Path:
    if background_path is not None:
        handle = await session.resources.acquire_async(Path(background_path))
        session.store.update_background({"resource_handle": handle})

    for p in image_paths:
        handle = await session.resources.acquire_async(Path(p))
        session.store.add_image_layer(handle)

    if title is None:
        session.seed_initial_layer()
    else:
        session.store.add_text_layer(title)

    return await session.export_to_dir(out_dir)


def run_export(
    *,
    title: Optional[str] = None,
    background_path: Optional[PathLike] = None,
    image_paths: Sequence[PathLike] = (),
    out_dir: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Minimal callable entrypoint:
    - load settings + logging
    - open a session, place background / images / title
    - export one PNG to `out_dir` (defaults to settings.export_dir)
    - tear the session down
    - return {session_id, path, layers}
    """
    s = load_settings()
    setup_logging(s.log_level)

    with EditorSession.from_settings(s) as session:
        path = asyncio.run(
            _compose_and_export(
                session,
                title=title,
                background_path=background_path,
                image_paths=image_paths,
                out_dir=out_dir,
            )
        )
        return {
            "session_id": session.session_id,
            "path": str(path),
            "layers": len(session.state.layers),
        }
