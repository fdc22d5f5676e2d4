"""Render service orchestrating assets, renderers and the admission guard."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Sequence

from PIL import Image

from .assets import load_user_photo
from .errors import AdmissionRejected, ConfigError, InputUnavailable, PostinatorError
from .exporter import save_image
from .models import AssetBundle, RenderJob, RenderMode, StatItem
from .post_renderer import PostRenderer
from .reporting import StatsService
from .session_guard import SessionGuard
from .stats_renderer import StatsRenderer

logger = logging.getLogger(__name__)


class RenderService:
    """Run post and stats render jobs, one at a time per chat."""

    def __init__(
        self,
        assets: AssetBundle,
        guard: Optional[SessionGuard] = None,
        stats_service: Optional[StatsService] = None,
        max_workers: int = 4,
    ) -> None:
        self.assets = assets
        self.guard = guard or SessionGuard()
        self.stats_service = stats_service
        self.post_renderer = PostRenderer(assets)
        self.stats_renderer = StatsRenderer(assets)
        self.executor = ThreadPoolExecutor(max_workers=max_workers)

    # ------------------------------------------------------------------
    # Single jobs
    # ------------------------------------------------------------------
    def render_post(self, job: RenderJob) -> str:
        photo = load_user_photo(job.photo_path)
        composed = self.post_renderer.render(photo, job.caption)
        return save_image(composed, job.output_path)

    def render_stats(self, job: RenderJob, items: Optional[Sequence[StatItem]] = None) -> str:
        """Render stats for the period named in the job caption.

        Items are fetched through the stats service unless given. The user
        photo is optional here, an unreadable one is left out.
        """
        if items is None:
            if self.stats_service is None:
                raise ConfigError("stats requested but no reporting service is configured", stage="stats")
            items = self.stats_service.collect(job.caption)

        photo: Optional[Image.Image] = None
        if job.photo_path:
            try:
                photo = load_user_photo(job.photo_path)
            except InputUnavailable as exc:
                logger.warning("Stats photo omitted: %s", exc)

        composed = self.stats_renderer.render(list(items), job.caption, photo)
        return save_image(composed, job.output_path)

    def render(self, mode: RenderMode, job: RenderJob) -> str:
        if mode is RenderMode.POST:
            return self.render_post(job)
        if mode is RenderMode.STATS:
            return self.render_stats(job)
        raise ConfigError(f"no render mode selected ({mode.value})", stage="dispatch")

    # ------------------------------------------------------------------
    # Guarded execution
    # ------------------------------------------------------------------
    def run(self, chat_id: int, mode: RenderMode, job: RenderJob) -> str:
        """Render synchronously as the chat's only job."""
        with self.guard.job(chat_id):
            return self._run_admitted(chat_id, mode, job)

    def submit(self, chat_id: int, mode: RenderMode, job: RenderJob) -> "Future[str]":
        """Admit the job now and render it on the worker pool.

        Raises AdmissionRejected immediately when the chat is busy.
        """
        if not self.guard.try_start(chat_id):
            logger.info("Chat %s is busy, job rejected", chat_id)
            raise AdmissionRejected(chat_id)
        try:
            return self.executor.submit(self._run_and_finish, chat_id, mode, job)
        except RuntimeError:
            self.guard.finish(chat_id)
            raise

    def _run_and_finish(self, chat_id: int, mode: RenderMode, job: RenderJob) -> str:
        try:
            return self._run_admitted(chat_id, mode, job)
        finally:
            self.guard.finish(chat_id)

    def _run_admitted(self, chat_id: int, mode: RenderMode, job: RenderJob) -> str:
        logger.info("Rendering %s for chat %s", mode.value, chat_id)
        try:
            output = self.render(mode, job)
        except PostinatorError as exc:
            logger.error("Render %s for chat %s failed at %s: %s", mode.value, chat_id, exc.stage, exc.message)
            raise
        logger.info("Rendered %s for chat %s to %s", mode.value, chat_id, output)
        return output

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
