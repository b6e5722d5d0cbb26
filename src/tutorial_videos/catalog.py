"""The fixed catalog of tutorial videos and id lookup."""

import logging
from collections.abc import Iterator
from functools import lru_cache

from tutorial_videos.exceptions import VideoNotFoundError
from tutorial_videos.models import VideoRecord

logger = logging.getLogger(__name__)


TUTORIAL_VIDEOS: tuple[VideoRecord, ...] = (
    VideoRecord(
        id="Xpg2bnO_-eU",
        title="Introduction to Artificial Intelligence | Part 1",
        description=(
            "Welcome to the first part of our Artificial Intelligence (AI) series! "
            "Learn the basics of AI, its history, real-world applications, and how "
            "it's transforming industries. Topics: What is AI, History and evolution, "
            "Types of AI (Narrow, General & Super), Applications in everyday life, "
            "Future scope and career opportunities."
        ),
    ),
    VideoRecord(
        id="p6Yr-DVao3Y",
        title="Prompt Engineering - Introduction",
        description=(
            "Welcome to the first episode of our Prompt Engineering series! Learn what "
            "prompt engineering is, why it matters, and how it powers AI tools like "
            "ChatGPT, Gemini, and Claude. Topics: What is Prompt Engineering, "
            "Importance in AI and LLMs, How AI interprets input, Examples of effective "
            "prompts, Careers in Prompt Engineering."
        ),
    ),
    VideoRecord(
        id="PAKfEvJSLWA",
        title="Prompt Engineering Part 1 - Key Components",
        description=(
            "Learn the key components that make a prompt effective when working with "
            "AI tools. Topics: What makes a prompt effective, Key components (context, "
            "clarity, role, tone, constraints), Examples of good vs. bad prompts, Tips "
            "for improving AI responses, Common mistakes to avoid."
        ),
    ),
    VideoRecord(
        id="ng5lAQay4qI",
        title="Testing Prompts on Google Gemini",
        description=(
            "Watch how we test and experiment with different prompts on Google Gemini. "
            "See how changing just a few words can completely transform AI responses. "
            "Topics: How Gemini interprets prompts, Tips for writing clear prompts, "
            "Creative vs. structured prompt styles, Real examples and live testing."
        ),
    ),
)


class VideoCatalog:
    """Read-only, ordered collection of video records."""

    def __init__(self, videos: tuple[VideoRecord, ...]):
        self._videos = tuple(videos)

    def __iter__(self) -> Iterator[VideoRecord]:
        return iter(self._videos)

    def __len__(self) -> int:
        return len(self._videos)

    @property
    def videos(self) -> tuple[VideoRecord, ...]:
        return self._videos

    def ids(self) -> list[str]:
        return [video.id for video in self._videos]

    def find(self, video_id: str) -> VideoRecord | None:
        """Return the record with exactly this id, or None."""
        for video in self._videos:
            if video.id == video_id:
                return video
        return None

    def get(self, video_id: str) -> VideoRecord:
        """Return the record with this id or raise VideoNotFoundError."""
        video = self.find(video_id)
        if video is None:
            logger.info("Video %s not found in catalog", video_id)
            raise VideoNotFoundError(video_id, self.ids())
        return video


@lru_cache
def get_catalog() -> VideoCatalog:
    """Return the process-wide catalog."""
    return VideoCatalog(TUTORIAL_VIDEOS)
