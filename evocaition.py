# evocaition.py
"""
A small single-shot client for OpenAI-compatible text generation APIs.

Goals:
- One request per call, no hidden retries
- Chat and legacy completion endpoints behind the same entrypoints
- Incremental streaming that survives arbitrary chunk boundaries
- Optional image attachment (local file inlined as base64, or a remote URL)

Usage:
    from evocaition import EvocaitionClient, build_request

    client = EvocaitionClient(api_key="sk-...")
    req = build_request("Write a haiku about rust", sampling={"temperature": 0.7})
    print(client.complete(req).full_text)

    for text in client.stream_text(req):
        print(text, end="", flush=True)

    # or the simple facade:
    from evocaition import complete
    print(complete("2+2=", mode="completion").full_text)

Command line:
    evocaition --prompt "Tell me a story" -s --temp 0.8
    echo "Describe this" | evocaition --image ./cat.png
"""

from __future__ import annotations

import argparse
import base64
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Literal, Optional, TextIO, TypedDict, Union

import requests
from dotenv import load_dotenv

__all__ = [
    "EvocaitionClient",
    "GenerationRequest",
    "SamplingConfig",
    "InlineImage",
    "RemoteImage",
    "TextDelta",
    "Done",
    "StreamError",
    "CompletionResult",
    "StreamDecoder",
    "EventStream",
    "OutputSink",
    "EvocaitionError",
    "EmptyPromptError",
    "UnsupportedCombinationError",
    "ImageNotFoundError",
    "UnreadableImageError",
    "UnsupportedImageFormatError",
    "ConnectionFailedError",
    "HttpError",
    "ApiError",
    "MalformedFrameError",
    "MalformedBodyError",
    "SchemaMismatchError",
    "build_request",
    "request_payload",
    "encode_image",
    "read_image_bytes",
    "detect_image_mime",
    "lookup_api_key",
    "get_api_url",
    "get_model_id",
    "decode_stream",
    "decode_completion",
    "iter_text",
    "render",
    "complete",
    "stream_completion",
    "main",
    "__version__",
]

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL_ID = "google/gemini-2.0-flash-exp:free"
API_KEY_ENV = "OPENROUTER_API_KEY"
API_URL_ENV = "EVOCAITION_API"
MODEL_ID_ENV = "EVOCAITION_MODEL_ID"
DEFAULT_REFERER = "https://github.com/tbogdala/evocaition"
DEFAULT_TITLE = "evocaition"

DONE_SENTINEL = "[DONE]"

Mode = Literal["chat", "completion"]

# Wire field names, in the order they are added to the payload.
SAMPLING_FIELDS = (
    "max_tokens",
    "temperature",
    "top_p",
    "min_p",
    "top_k",
    "repetition_penalty",
    "seed",
)


# ---------- Errors ----------


class EvocaitionError(Exception):
    """Base class for every failure raised by this module."""


class EmptyPromptError(EvocaitionError, ValueError):
    """Raised when the prompt is empty or whitespace only."""


class UnsupportedCombinationError(EvocaitionError, ValueError):
    """Raised when an image is attached to a legacy completion request."""


class ImageNotFoundError(EvocaitionError, FileNotFoundError):
    pass


class UnreadableImageError(EvocaitionError, OSError):
    pass


class UnsupportedImageFormatError(EvocaitionError, ValueError):
    """Raised when image bytes are not JPEG, PNG or WEBP."""


class ConnectionFailedError(EvocaitionError, ConnectionError):
    """Raised when the endpoint cannot be reached or the connection breaks."""


class HttpError(EvocaitionError):
    """Raised for a non-2xx response. The body is kept verbatim."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"API request failed with status {status}: {body}")
        self.status = status
        self.body = body


class ApiError(EvocaitionError):
    """Raised when the server answers with an ``{"error": {...}}`` object."""

    def __init__(self, code: Any, message: str, metadata: Any = None) -> None:
        text = f"API request failed with code {code}: {message}"
        if metadata:
            text += f"\nError metadata: {metadata}"
        super().__init__(text)
        self.code = code
        self.message = message
        self.metadata = metadata

    @classmethod
    def from_payload(cls, error: Any) -> "ApiError":
        if isinstance(error, dict):
            return cls(error.get("code"), str(error.get("message", "")), error.get("metadata"))
        return cls(None, str(error))


class MalformedFrameError(EvocaitionError, ValueError):
    """A single stream frame could not be parsed. Recoverable."""


class MalformedBodyError(EvocaitionError, ValueError):
    pass


class SchemaMismatchError(EvocaitionError, ValueError):
    pass


# ---------- Data model ----------


class SamplingConfig(TypedDict, total=False):
    max_tokens: int
    temperature: float
    top_p: float
    min_p: float
    top_k: int
    repetition_penalty: float
    seed: int


@dataclass(frozen=True)
class InlineImage:
    mime_type: str
    data: str  # base64, no data-URI prefix

    @property
    def url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class RemoteImage:
    url: str


ImageAttachment = Union[InlineImage, RemoteImage]


@dataclass(frozen=True)
class GenerationRequest:
    mode: Mode
    prompt: str
    model_id: str
    image: Optional[ImageAttachment] = None
    sampling: Optional[SamplingConfig] = None


@dataclass(frozen=True)
class TextDelta:
    text: str


@dataclass(frozen=True)
class Done:
    pass


@dataclass(frozen=True)
class StreamError:
    error: EvocaitionError

    @property
    def message(self) -> str:
        return str(self.error)

    @property
    def recoverable(self) -> bool:
        return isinstance(self.error, MalformedFrameError)


StreamEvent = Union[TextDelta, Done, StreamError]


@dataclass(frozen=True)
class CompletionResult:
    full_text: str


# ---------- Configuration ----------


def lookup_api_key(explicit: Optional[str] = None, env_var: str = API_KEY_ENV) -> Optional[str]:
    """Return the explicit key, else the environment value, else None."""
    if explicit:
        return explicit
    return os.getenv(env_var) or None


def get_api_url() -> str:
    """Return the API base URL from the environment or the default."""
    return os.getenv(API_URL_ENV) or DEFAULT_API_URL


def get_model_id() -> str:
    """Return the model id from the environment or the default."""
    return os.getenv(MODEL_ID_ENV) or DEFAULT_MODEL_ID


# ---------- Image encoding ----------

_IMAGE_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
)

_URL_SCHEMES = {"http", "https", "data"}


def detect_image_mime(data: bytes) -> Optional[str]:
    """Sniff JPEG/PNG/WEBP from magic bytes. Returns None for anything else."""
    for signature, mime in _IMAGE_SIGNATURES:
        if data.startswith(signature):
            return mime
    # WEBP is a RIFF container: "RIFF" <size:4> "WEBP"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def read_image_bytes(path: str) -> bytes:
    """Read a local image file, translating OS errors to this module's errors."""
    if not os.path.exists(path):
        raise ImageNotFoundError(f"image file not found: {path}")
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise UnreadableImageError(f"failed to read image file {path}: {exc}") from exc


def _is_url(ref: str) -> bool:
    from urllib.parse import urlparse

    return urlparse(ref).scheme.lower() in _URL_SCHEMES


def encode_image(ref: str, *, reader: Callable[[str], bytes] = read_image_bytes) -> ImageAttachment:
    """
    Resolve an image reference to an attachment.

    URLs (http, https, data) are passed through untouched; the server fetches
    them. Anything else is treated as a local path, read through `reader` and
    inlined as base64 with the MIME type sniffed from its content.
    """
    if _is_url(ref):
        return RemoteImage(url=ref)

    data = reader(ref)
    mime = detect_image_mime(data)
    if mime is None:
        raise UnsupportedImageFormatError(
            f"unsupported image format for {ref}: expected JPEG, PNG or WEBP"
        )
    return InlineImage(mime_type=mime, data=base64.b64encode(data).decode("ascii"))


# ---------- Request building ----------


def build_request(
    prompt: str,
    *,
    mode: Mode = "chat",
    model_id: Optional[str] = None,
    sampling: Optional[SamplingConfig] = None,
    image: Union[ImageAttachment, str, None] = None,
    image_resolver: Callable[[str], ImageAttachment] = encode_image,
) -> GenerationRequest:
    """
    Validate inputs and assemble an immutable GenerationRequest.

    `image` may be an already resolved attachment or a path/URL string, which
    is resolved through `image_resolver` only after validation succeeds, so an
    invalid combination never touches the filesystem.
    """
    if mode not in ("chat", "completion"):
        raise ValueError(f"mode must be 'chat' or 'completion', got {mode!r}")
    if not isinstance(prompt, str) or not prompt.strip():
        raise EmptyPromptError("prompt must be a non-empty string")
    if image is not None and mode == "completion":
        raise UnsupportedCombinationError("an image cannot be attached to a plain completion request")

    if isinstance(image, str):
        image = image_resolver(image)

    cleaned: Optional[SamplingConfig] = None
    if sampling:
        cleaned = {k: v for k, v in sampling.items() if v is not None}  # type: ignore[assignment]

    return GenerationRequest(
        mode=mode,
        prompt=prompt,
        model_id=model_id or get_model_id(),
        image=image,
        sampling=cleaned or None,
    )


def request_payload(request: GenerationRequest, *, stream: bool = False) -> Dict[str, Any]:
    """Return the JSON body for `request` in chat or plain shape."""
    payload: Dict[str, Any] = {"model": request.model_id}

    if request.mode == "completion":
        payload["prompt"] = request.prompt
    else:
        content: Any = request.prompt
        if request.image is not None:
            content = [
                {"type": "text", "text": request.prompt},
                {"type": "image_url", "image_url": {"url": request.image.url}},
            ]
        payload["messages"] = [{"role": "user", "content": content}]

    payload["stream"] = stream

    sampling = request.sampling or {}
    for field in SAMPLING_FIELDS:
        value = sampling.get(field)
        if value is not None:
            payload[field] = value
    return payload


# ---------- Response decoding ----------


def _choice_text(obj: Dict[str, Any]) -> Optional[str]:
    """
    Pull text out of choices[0], accepting every shape the endpoints send:
      - streaming chat:  {"delta": {"content": ...}}
      - plain:           {"text": ...}
      - chat message:    {"message": {"content": ...}}
    Returns None when no text is present.
    """
    choices = obj.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None

    delta = choice.get("delta")
    if isinstance(delta, dict):
        content = delta.get("content")
        return content if isinstance(content, str) else None
    text = choice.get("text")
    if isinstance(text, str):
        return text
    message = choice.get("message")
    if isinstance(message, dict):
        content = message.get("content")
        return content if isinstance(content, str) else None
    return None


def decode_completion(body: Union[bytes, str]) -> CompletionResult:
    """Parse one complete (non-streaming) response body."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise MalformedBodyError(f"Failed to parse JSON: {exc}\nRaw JSON: {body}") from exc
    if not isinstance(data, dict):
        raise SchemaMismatchError(f"expected a JSON object, got {type(data).__name__}")
    if data.get("error"):
        raise ApiError.from_payload(data["error"])

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise SchemaMismatchError("response has no choices")
    choice = choices[0]
    if isinstance(choice.get("text"), str):
        return CompletionResult(full_text=choice["text"])
    message = choice.get("message")
    if isinstance(message, dict):
        # content is null for e.g. tool-call replies
        return CompletionResult(full_text=message.get("content") or "")
    raise SchemaMismatchError("neither choices[0].message.content nor choices[0].text is present")


class StreamDecoder:
    """
    Incremental decoder for an event-stream response body.

    Bytes go in through feed(); complete frames (terminated by a blank line)
    are parsed and turned into events. Partial frames stay in the buffer
    until more bytes arrive. Call close() once the connection ends.
    """

    def __init__(self) -> None:
        self._buffer = b""
        self.done = False

    def feed(self, chunk: bytes) -> List[StreamEvent]:
        if self.done or not chunk:
            return []
        # A "\r" left at the end of the previous chunk joins its "\n" here.
        self._buffer = (self._buffer + chunk).replace(b"\r\n", b"\n")

        events: List[StreamEvent] = []
        while not self.done:
            end = self._buffer.find(b"\n\n")
            if end < 0:
                break
            frame = self._buffer[:end]
            self._buffer = self._buffer[end + 2:]
            events.extend(self._parse_frame(frame))
        return events

    def close(self) -> List[StreamEvent]:
        if self.done:
            return []
        events: List[StreamEvent] = []
        tail, self._buffer = self._buffer, b""
        if tail.strip():
            events.extend(self._parse_frame(tail))
        if not self.done:
            logger.debug("stream closed without %s; treating as complete", DONE_SENTINEL)
            self.done = True
            events.append(Done())
        return events

    def _parse_frame(self, frame: bytes) -> List[StreamEvent]:
        try:
            text = frame.decode("utf-8")
        except UnicodeDecodeError as exc:
            return [self._malformed(f"frame is not valid UTF-8: {exc}", frame)]

        data_lines: List[str] = []
        for line in text.split("\n"):
            if not line or line.startswith(":"):
                continue
            field, _, value = line.partition(":")
            if field != "data":
                continue
            data_lines.append(value[1:] if value.startswith(" ") else value)
        if not data_lines:
            return []

        data = "\n".join(data_lines)
        if data.strip() == DONE_SENTINEL:
            logger.debug("received %s", DONE_SENTINEL)
            self.done = True
            return [Done()]

        try:
            obj = json.loads(data)
        except ValueError as exc:
            return [self._malformed(f"Failed to parse JSON: {exc}", frame)]
        if not isinstance(obj, dict):
            return [self._malformed(f"expected a JSON object, got {type(obj).__name__}", frame)]
        if obj.get("error"):
            # fatal: nothing after a server error is trusted
            self.done = True
            return [StreamError(ApiError.from_payload(obj["error"]))]

        content = _choice_text(obj)
        if content:
            return [TextDelta(content)]
        return []

    @staticmethod
    def _malformed(reason: str, frame: bytes) -> StreamError:
        preview = frame[:200].decode("utf-8", errors="replace")
        logger.warning("skipping malformed stream frame: %s (raw: %r)", reason, preview)
        return StreamError(MalformedFrameError(reason))


def decode_stream(chunks: Iterable[bytes]) -> Iterator[StreamEvent]:
    """
    Lazily decode raw byte chunks into StreamEvents.

    The sequence ends with exactly one Done, unless the server sends an
    error object, which is raised as ApiError after the deltas before it.
    No further chunks are pulled from `chunks` once the stream is finished.
    """
    decoder = StreamDecoder()
    for chunk in chunks:
        yield from _raise_fatal(decoder.feed(chunk))
        if decoder.done:
            return
    yield from _raise_fatal(decoder.close())


def _raise_fatal(events: List[StreamEvent]) -> Iterator[StreamEvent]:
    for event in events:
        if isinstance(event, StreamError) and not event.recoverable:
            raise event.error
        yield event


def iter_text(events: Iterable[StreamEvent]) -> Iterator[str]:
    for event in events:
        if isinstance(event, TextDelta):
            yield event.text


# ---------- Client (transport) ----------


class EvocaitionClient:
    """
    Thin transport over one OpenAI-compatible endpoint:
      - complete(request): buffered request, returns CompletionResult
      - stream(request): streaming request, returns a lazy StreamEvent iterator
      - stream_text(request): same, yielding only text

    Every call is a single attempt; nothing is retried.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        referer: Optional[str] = DEFAULT_REFERER,
        title: Optional[str] = DEFAULT_TITLE,
    ) -> None:
        self.api_url = (api_url or get_api_url()).rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.referer = referer
        self.title = title

    # ---------- Public API ----------

    def complete(self, request: GenerationRequest) -> CompletionResult:
        with self._post(request, stream=False) as resp:
            body = resp.content
        return decode_completion(body)

    def stream(self, request: GenerationRequest) -> "EventStream":
        """
        POST a streaming request and return the decoded events.

        The request is sent immediately, so connection and HTTP errors are
        raised here. The returned EventStream can be consumed once; it closes
        the connection when exhausted, on error, or on close(), so callers
        that may stop early should use it as a context manager.
        """
        resp = self._post(request, stream=True)
        return EventStream(resp, decode_stream(self._iter_chunks(resp)))

    def stream_text(self, request: GenerationRequest) -> Iterator[str]:
        return iter_text(self.stream(request))

    # ---------- Internals ----------

    def _url(self, mode: Mode) -> str:
        path = "completions" if mode == "completion" else "chat/completions"
        return f"{self.api_url}/{path}"

    def _headers(self, stream: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if stream:
            headers["Accept"] = "text/event-stream"
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers

    def _post(self, request: GenerationRequest, *, stream: bool) -> requests.Response:
        url = self._url(request.mode)
        payload = request_payload(request, stream=stream)
        logger.debug("POST %s (model=%s, stream=%s)", url, request.model_id, stream)
        try:
            resp = self.session.post(
                url,
                headers=self._headers(stream),
                json=payload,
                timeout=self.timeout,
                stream=stream,
            )
        except requests.RequestException as exc:
            raise ConnectionFailedError(f"request to {url} failed: {exc}") from exc

        if not resp.ok:
            try:
                body = resp.text
            finally:
                resp.close()
            raise HttpError(resp.status_code, body)
        return resp

    @staticmethod
    def _iter_chunks(resp: requests.Response) -> Iterator[bytes]:
        try:
            # chunk_size=None yields data as soon as it arrives
            for chunk in resp.iter_content(chunk_size=None):
                if chunk:
                    yield chunk
        except requests.RequestException as exc:
            raise ConnectionFailedError(f"connection lost while streaming: {exc}") from exc


class EventStream:
    """Single-use iterator over a live streaming response."""

    def __init__(self, resp: requests.Response, events: Iterator[StreamEvent]) -> None:
        self._resp = resp
        self._events = events

    def __iter__(self) -> "EventStream":
        return self

    def __next__(self) -> StreamEvent:
        try:
            return next(self._events)
        except BaseException:
            # StopIteration included: the response is finished either way
            self.close()
            raise

    def close(self) -> None:
        self._events.close()  # type: ignore[attr-defined]
        self._resp.close()

    def __enter__(self) -> "EventStream":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


# ---------- Output ----------


class OutputSink:
    """Writes generated text to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self._last = ""

    def write_delta(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()
        self._last = text

    def write_events(self, events: Iterable[StreamEvent]) -> None:
        for event in events:
            if isinstance(event, TextDelta):
                self.write_delta(event.text)
            elif isinstance(event, Done):
                self.end_stream()
            # StreamError: already logged by the decoder; keep going

    def end_stream(self) -> None:
        if self._last and not self._last.endswith("\n"):
            self.stream.write("\n")
            self.stream.flush()
        self._last = ""

    def write_result(self, result: CompletionResult) -> None:
        self.stream.write(result.full_text + "\n")
        self.stream.flush()


def render(
    client: EvocaitionClient,
    request: GenerationRequest,
    sink: OutputSink,
    *,
    stream: bool = False,
) -> None:
    """Run one request end to end and write its output to `sink`."""
    if stream:
        sink.write_events(client.stream(request))
    else:
        sink.write_result(client.complete(request))


# -------- Small functional facade (nice for scripts) --------

_default_client: Optional[EvocaitionClient] = None


def _client() -> EvocaitionClient:
    global _default_client
    if _default_client is None:
        _default_client = EvocaitionClient(api_key=lookup_api_key())
    return _default_client


def complete(
    prompt: str,
    *,
    mode: Mode = "chat",
    model_id: Optional[str] = None,
    sampling: Optional[SamplingConfig] = None,
    image: Optional[str] = None,
) -> CompletionResult:
    """Build a request and run it against the default client (buffered)."""
    req = build_request(prompt, mode=mode, model_id=model_id, sampling=sampling, image=image)
    return _client().complete(req)


def stream_completion(
    prompt: str,
    *,
    mode: Mode = "chat",
    model_id: Optional[str] = None,
    sampling: Optional[SamplingConfig] = None,
    image: Optional[str] = None,
) -> Iterator[str]:
    """Build a request and stream its text from the default client."""
    req = build_request(prompt, mode=mode, model_id=model_id, sampling=sampling, image=image)
    return _client().stream_text(req)


# -------- Command line --------


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="evocaition",
        description=(
            "A command-line tool to interact with AI LLMs via APIs. "
            "Reads from STDIN if no prompt is supplied."
        ),
    )
    parser.add_argument("prompt", nargs="?", help="Prompt text (reads STDIN when omitted)")
    parser.add_argument("--prompt", dest="prompt_opt", metavar="PROMPT", help="Prompt text, same as the positional argument")
    parser.add_argument("--api", metavar="URL", default=None, help=f"API base URL (default: ${API_URL_ENV} or {DEFAULT_API_URL})")
    parser.add_argument("--key", metavar="API_KEY", default=None, help=f"API key; if absent, ${API_KEY_ENV} is checked")
    parser.add_argument("--model-id", metavar="MODEL_ID", default=None, help=f"Model to use (default: ${MODEL_ID_ENV} or {DEFAULT_MODEL_ID})")
    parser.add_argument("-n", "--max-tokens", type=int, metavar="INT", help="Maximum number of tokens to generate")
    parser.add_argument("--temp", type=float, metavar="F32", help="Sampling temperature")
    parser.add_argument("--top-p", type=float, metavar="F32", help="Nucleus sampling probability mass")
    parser.add_argument("--min-p", type=float, metavar="F32", help="Minimum token probability relative to the most probable token")
    parser.add_argument("--top-k", type=int, metavar="INT", help="Sample only from this many top tokens")
    parser.add_argument("--rep-pen", type=float, metavar="F32", help="Repetition penalty")
    parser.add_argument("--seed", type=int, metavar="INT", help="Generation seed (determinism is not guaranteed)")
    parser.add_argument("-s", "--stream", action="store_true", help="Write the response to stdout as it is received")
    parser.add_argument("--plain", action="store_true", help="Use the non-chat completion API")
    parser.add_argument("--image", metavar="FILEPATH_OR_URL", help="Image to attach; '--plain' must not be used")
    parser.add_argument("--timeout", type=float, metavar="SECONDS", help="Request timeout (default: none)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return parser.parse_args(argv)


def _sampling_from_args(args: argparse.Namespace) -> SamplingConfig:
    sampling: SamplingConfig = {}
    pairs = (
        ("max_tokens", args.max_tokens),
        ("temperature", args.temp),
        ("top_p", args.top_p),
        ("min_p", args.min_p),
        ("top_k", args.top_k),
        ("repetition_penalty", args.rep_pen),
        ("seed", args.seed),
    )
    for field, value in pairs:
        if value is not None:
            sampling[field] = value  # type: ignore[literal-required]
    return sampling


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        prompt = args.prompt_opt if args.prompt_opt is not None else args.prompt
        if prompt is None:
            prompt = sys.stdin.read()
        request = build_request(
            prompt,
            mode="completion" if args.plain else "chat",
            model_id=args.model_id,
            sampling=_sampling_from_args(args),
            image=args.image,
        )
        client = EvocaitionClient(args.api, lookup_api_key(args.key), timeout=args.timeout)
        render(client, request, OutputSink(), stream=args.stream)
    except EvocaitionError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
