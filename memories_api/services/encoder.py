"""Slideshow encoding with FFmpeg.

The timeline is written to a manifest listing each photo and how long it is
shown. The encoder reads that manifest back and opens every entry as its own
looped still-image input, so photos of different sizes and formats each get
their own decoder. The filter graph normalises each input to the output frame,
applies zoom ramps and captions, chains xfade transitions at each segment's
planned start offset and finishes with the optional fade in/out.
"""

import logging
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from memories_api.core.abstractions import BaseEncoder, EncodeResult
from memories_api.core.errors import ProcessExitFailure, ProcessSpawnFailure, SlideshowError
from memories_api.schemas.requests import TransitionKind
from memories_api.services.timeline import ResolvedTimeline, Segment

logger = logging.getLogger(__name__)

# xfade transition used at segment boundaries for each slideshow style
XFADE_TRANSITIONS = {
    TransitionKind.FADE: "fade",
    TransitionKind.SLIDE: "slideleft",
    TransitionKind.ZOOM: "zoomin",
}

CAPTION_MARGIN = 60  # px from the bottom edge

# Substrings that mark real error lines in FFmpeg's stderr (vs. progress output)
ERROR_MARKERS = [
    'error', 'invalid', 'no such', 'not found',
    'failed', 'unable', 'undefined', 'unknown',
]


@dataclass(frozen=True)
class ManifestEntry:
    """One photo of the manifest and how long it stays on screen."""
    path: Path
    duration: float


def escape_manifest_path(path: Path) -> str:
    """Quote a path for the manifest: 'it'\\''s.jpg'."""
    return "'" + str(path).replace("'", "'\\''") + "'"


def unescape_manifest_path(quoted: str) -> str:
    if len(quoted) < 2 or quoted[0] != "'" or quoted[-1] != "'":
        raise ValueError(f"Unquoted manifest path: {quoted}")
    return quoted[1:-1].replace("'\\''", "'")


def render_manifest(timeline: ResolvedTimeline) -> str:
    """Render the ordered manifest for a timeline.

    Uses the concat-list syntax: a ``file`` line per segment followed by its
    ``duration``.
    """
    lines = []
    for segment in timeline.segments:
        lines.append(f"file {escape_manifest_path(segment.photo.path.resolve())}")
        lines.append(f"duration {segment.duration:.3f}")
    return '\n'.join(lines) + '\n'


def parse_manifest(text: str) -> List[ManifestEntry]:
    """Read the entries of a manifest written by ``render_manifest``."""
    entries = []
    path = None
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        directive, _, value = line.partition(' ')
        if directive == 'file':
            path = Path(unescape_manifest_path(value))
        elif directive == 'duration' and path is not None:
            entries.append(ManifestEntry(path=path, duration=float(value)))
            path = None
        else:
            raise ValueError(f"Unexpected manifest line: {line}")
    if path is not None:
        raise ValueError(f"Manifest entry {path} has no duration")
    return entries


def read_manifest(manifest_path: Path) -> List[ManifestEntry]:
    try:
        return parse_manifest(Path(manifest_path).read_text())
    except (OSError, ValueError) as e:
        raise SlideshowError(f"Unreadable manifest {manifest_path}: {e}") from e


def escape_drawtext(text: str) -> str:
    """Escape text for FFmpeg drawtext filter."""
    # FFmpeg drawtext needs these chars escaped
    return text.replace('\\', '\\\\').replace("'", "'\\''").replace(':', '\\:').replace('%', '%%')


def _segment_filters(
    segment: Segment,
    width: int,
    height: int,
    fps: int,
    font_file: Optional[str],
    font_size: int,
) -> List[str]:
    """Filters that turn one looped photo input into its segment."""
    # Fit inside the frame, pad the rest black, constant rate for xfade
    filters = [
        f'scale={width}:{height}:force_original_aspect_ratio=decrease',
        f'pad={width}:{height}:(ow-iw)/2:(oh-ih)/2:color=black',
        'setsar=1',
        f'fps={fps}',
        'format=yuv420p',
    ]

    if segment.zoom:
        # 'on' counts output frames from 0, so the last frame stays below the ceiling
        per_frame = segment.zoom.rate / fps
        filters.append(
            f"zoompan=z='min(1+{per_frame:.6f}*on,{segment.zoom.ceiling:.3f})':"
            f"x='iw/2-(iw/zoom/2)':y='ih/2-(ih/zoom/2)':"
            f"d=1:s={width}x{height}:fps={fps}"
        )
        filters.extend(['setsar=1', 'format=yuv420p'])

    if segment.caption:
        text = escape_drawtext(' '.join(segment.caption.split()))
        font = f"fontfile='{escape_drawtext(font_file)}':" if font_file else ''
        filters.append(
            f"drawtext={font}text='{text}':"
            f"fontsize={font_size}:fontcolor=white:"
            f"box=1:boxcolor=black@0.5:boxborderw=12:"
            f"x=(w-text_w)/2:y=h-text_h-{CAPTION_MARGIN}"
        )

    return filters


def build_filter_graph(
    timeline: ResolvedTimeline,
    width: int = 1280,
    height: int = 720,
    fps: int = 30,
    font_file: Optional[str] = None,
    font_size: int = 36,
) -> str:
    """Build the filter_complex graph for a timeline.

    Input ``i`` is the i-th segment's photo. Output label is [out].
    """
    segments = timeline.segments
    filter_parts = []

    for i, segment in enumerate(segments):
        filters = _segment_filters(segment, width, height, fps, font_file, font_size)
        filter_parts.append(f"[{i}:v]{','.join(filters)}[v{i}]")

    # Chain xfade transitions
    prev = 'v0'
    for i in range(1, len(segments)):
        segment = segments[i]
        spec = segment.transition_in
        transition = XFADE_TRANSITIONS[spec.kind]
        out_label = f'xf{i}'
        filter_parts.append(
            f'[{prev}][v{i}]xfade=transition={transition}:'
            f'duration={spec.duration:.3f}:offset={segment.start_offset:.3f}[{out_label}]'
        )
        prev = out_label

    effects = []
    if timeline.fade_in:
        effects.append(f'fade=t=in:st={timeline.fade_in.start:.3f}:d={timeline.fade_in.duration:.3f}')
    if timeline.fade_out:
        effects.append(f'fade=t=out:st={timeline.fade_out.start:.3f}:d={timeline.fade_out.duration:.3f}')
    filter_parts.append(f"[{prev}]{','.join(effects) or 'null'}[out]")

    return ';\n'.join(filter_parts)


def describe_failure(returncode: int, stderr: str) -> str:
    """Pull a readable message out of FFmpeg's stderr."""
    error_lines = [
        l for l in stderr.splitlines()
        if any(k in l.lower() for k in ERROR_MARKERS)
    ]
    if error_lines:
        return '\n'.join(error_lines[-5:])
    if returncode < 0:
        try:
            sig_name = signal.Signals(-returncode).name
        except (ValueError, AttributeError):
            sig_name = str(-returncode)
        return f'FFmpeg killed by signal {sig_name}'
    return stderr[-500:]


def ffmpeg_available(binary: str = 'ffmpeg') -> bool:
    """Check if FFmpeg is available."""
    try:
        result = subprocess.run(
            [binary, '-version'],
            capture_output=True,
            text=True
        )
        return result.returncode == 0
    except OSError:
        return False


class FFmpegEncoder(BaseEncoder):
    """Encodes slideshow timelines by running the ffmpeg executable."""

    def __init__(
        self,
        binary: str = 'ffmpeg',
        width: int = 1280,
        height: int = 720,
        fps: int = 30,
        preset: str = 'medium',
        crf: int = 23,
        font_file: Optional[str] = None,
        font_size: int = 36,
    ):
        self._binary = binary
        self._width = width
        self._height = height
        self._fps = fps
        self._preset = preset
        self._crf = crf
        self._font_file = font_file
        self._font_size = font_size

    @property
    def encoder_name(self) -> str:
        return "ffmpeg"

    def build_command(
        self,
        timeline: ResolvedTimeline,
        manifest_path: Path,
        output_path: Path,
    ) -> List[str]:
        """Build the full, deterministic ffmpeg argument list.

        One looped still input per manifest entry, in manifest order.
        """
        entries = read_manifest(manifest_path)
        if len(entries) != len(timeline.segments):
            raise SlideshowError(
                f'Manifest lists {len(entries)} photos, timeline has {len(timeline.segments)}'
            )

        inputs = []
        for entry in entries:
            inputs.extend([
                '-loop', '1', '-framerate', str(self._fps),
                '-t', f'{entry.duration:.3f}', '-i', str(entry.path),
            ])

        filter_graph = build_filter_graph(
            timeline,
            width=self._width,
            height=self._height,
            fps=self._fps,
            font_file=self._font_file,
            font_size=self._font_size,
        )

        cmd = [
            self._binary, '-hide_banner', '-nostdin', '-y',
            *inputs,
            '-filter_complex', filter_graph,
            '-map', '[out]',
            '-an',
            '-r', str(self._fps),
            '-c:v', 'libx264',
            '-preset', self._preset,
            '-crf', str(self._crf),
            '-pix_fmt', 'yuv420p',
            # Fast start for web streaming
            '-movflags', '+faststart',
        ]
        if timeline.title:
            cmd.extend(['-metadata', f'title={timeline.title}'])
        cmd.append(str(output_path))
        return cmd

    def encode(
        self,
        timeline: ResolvedTimeline,
        manifest_path: Path,
        output_path: Path,
    ) -> EncodeResult:
        """Run ffmpeg and wait for it to exit.

        No retry on failure: the caller decides whether to submit again.
        """
        cmd = self.build_command(timeline, manifest_path, output_path)
        n = len(timeline.segments)
        logger.info(
            f'Running FFmpeg with {n} photos, transition={timeline.transition.value}, '
            f'duration={timeline.total_duration:.1f}s'
        )
        logger.debug(f"FFmpeg command: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            logger.error(f'Could not launch FFmpeg ({self._binary}): {e}')
            raise ProcessSpawnFailure(f'Could not launch encoder {self._binary!r}: {e}') from e

        if result.returncode != 0:
            logger.error(f'FFmpeg returncode: {result.returncode}')
            logger.error(f'FFmpeg stderr:\n{result.stderr}')
            err_msg = describe_failure(result.returncode, result.stderr or '')
            raise ProcessExitFailure(
                f'FFmpeg failed (rc={result.returncode}): {err_msg}',
                exit_code=result.returncode,
                stderr=result.stderr,
            )

        return EncodeResult(
            output_path=output_path,
            duration_seconds=timeline.total_duration,
            command=cmd,
        )
