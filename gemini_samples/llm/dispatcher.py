"""Request dispatcher for the four sample generation modes.

Each mode builds one payload, forwards it to the model, and relays every
part of every returned candidate to an output sink. There is no retry or
recovery: the first error propagates to the caller unchanged.
"""

from collections.abc import Callable, Iterable
from contextlib import closing
from enum import StrEnum
from pathlib import Path

import httpx
import structlog

from gemini_samples.llm import prompts
from gemini_samples.llm.factory import create_client
from gemini_samples.llm.files import read_image
from gemini_samples.llm.models import Candidate, Content, Text
from gemini_samples.llm.protocols import GenerativeModel
from gemini_samples.settings import AppSettings


logger = structlog.get_logger()

Sink = Callable[[str], None]


class Mode(StrEnum):
    """Request modes, selectable by name."""

    TEXT = "text"
    TEXT_AND_IMAGE = "image"
    CHAT = "chat"
    STREAM = "stream"


def print_candidates(candidates: Iterable[Candidate], sink: Sink) -> int:
    """Write each part of each candidate to the sink, in order.

    Args:
        candidates: Candidates to relay.
        sink: Line-oriented output callable.

    Returns:
        Number of parts written.
    """
    written = 0
    for candidate in candidates:
        for part in candidate.content.parts:
            sink(str(part))
            written += 1
    return written


class RequestDispatcher:
    """Runs one request mode against a generative model.

    Attributes:
        model: Model the requests are sent to.
    """

    def __init__(
        self,
        model: GenerativeModel,
        sink: Sink,
        image_dir: Path = Path(),
    ) -> None:
        """Initialize the dispatcher.

        Args:
            model: Model implementing the generation protocol.
            sink: Output callable receiving one rendered part per call.
            image_dir: Directory the sample images are read from.
        """
        self.model = model
        self._sink = sink
        self._image_dir = image_dir
        self._log = logger.bind(component="llm", subcomponent="dispatcher")

    def generate_text(self, prompt: str) -> list[Candidate]:
        """Generate from a text-only prompt."""
        response = self.model.generate_content(Text(prompt))
        print_candidates(response.candidates, self._sink)
        return response.candidates

    def generate_from_images(
        self,
        image_names: Iterable[str],
        instruction: str,
        image_format: str = prompts.IMAGE_FORMAT,
    ) -> list[Candidate]:
        """Generate from images followed by a text instruction.

        Every image is read before the request is sent, so an unreadable
        file fails without any network access.

        Raises:
            InputFileError: If an image cannot be read.
        """
        images = [
            read_image(self._image_dir / name, image_format) for name in image_names
        ]
        self._log.info("images_loaded", count=len(images))

        response = self.model.generate_content(*images, Text(instruction))
        print_candidates(response.candidates, self._sink)
        return response.candidates

    def chat(self, history: list[Content], message: str) -> list[Candidate]:
        """Send a message into a conversation seeded with ``history``.

        The seeded turns are sent verbatim ahead of the new message.
        """
        session = self.model.start_chat(history=history)
        response = session.send_message(Text(message))
        print_candidates(response.candidates, self._sink)
        return response.candidates

    def stream(self, prompt: str) -> int:
        """Relay a streamed generation chunk by chunk.

        Each chunk is written as soon as it arrives. Nothing is buffered
        across chunks.

        Returns:
            Number of chunks consumed.
        """
        chunks = 0
        with closing(self.model.generate_content_stream(Text(prompt))) as stream:
            for response in stream:
                chunks += 1
                print_candidates(response.candidates, self._sink)
        self._log.info("stream_relayed", chunks=chunks)
        return chunks

    def dispatch(self, mode: Mode, prompt: str | None = None) -> None:
        """Run a mode with the sample inputs.

        Args:
            mode: Request mode to run.
            prompt: Optional text overriding the sample prompt for the
                text and stream modes.
        """
        self._log.info("dispatch_started", mode=mode.value)

        if mode is Mode.TEXT:
            self.generate_text(prompt or prompts.TEXT_PROMPT)
        elif mode is Mode.TEXT_AND_IMAGE:
            self.generate_from_images(prompts.IMAGE_FILES, prompts.IMAGE_INSTRUCTION)
        elif mode is Mode.CHAT:
            self.chat(prompts.chat_history(), prompts.CHAT_MESSAGE)
        elif mode is Mode.STREAM:
            self.stream(prompt or prompts.STREAM_PROMPT)
        else:
            msg = f"Unknown mode: {mode}"
            raise ValueError(msg)

        self._log.info("dispatch_complete", mode=mode.value)


def execute(  # noqa: PLR0913
    mode: Mode,
    settings: AppSettings,
    *,
    sink: Sink,
    image_dir: Path = Path(),
    prompt: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> None:
    """Build a client, run one mode, and release the client.

    The client is closed on every exit path, including errors.

    Args:
        mode: Request mode to run.
        settings: Credentials and model selection.
        sink: Output callable.
        image_dir: Directory holding the sample images.
        prompt: Optional prompt override.
        transport: Optional httpx transport (used to stub the API).

    Raises:
        ConfigError: If the API key is missing.
        InputFileError: If a sample image cannot be read.
        ProviderError: If the API call fails.
    """
    client = create_client(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout=settings.gemini_timeout_seconds,
        transport=transport,
    )
    with client:
        dispatcher = RequestDispatcher(
            client.generative_model(settings.gemini_model),
            sink=sink,
            image_dir=image_dir,
        )
        dispatcher.dispatch(mode, prompt=prompt)
