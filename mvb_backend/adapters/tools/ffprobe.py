"""
FFprobe adapter for video container metadata.
"""
import asyncio
import json
import math
import os
import shutil
from pathlib import Path
from typing import List, Optional

from mvb_shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)


class FFProbe:
    """
    FFprobe wrapper for video metadata extraction.

    Never raises exceptions - always returns Result.
    """

    def __init__(self, bin_name: str = "ffprobe", timeout: float = 10.0):
        """
        Initialize FFprobe adapter.

        Args:
            bin_name: FFprobe binary name or path
            timeout: Command timeout in seconds
        """
        self.bin = bin_name
        self.timeout = float(timeout)
        self._resolved_bin: Optional[str] = None
        self._available = self._check_available()

    def _resolve_executable(self, bin_name: str) -> Optional[str]:
        """
        Resolve and validate the ffprobe executable.

        Only a binary actually named ffprobe is accepted, never an arbitrary command string.
        """
        raw = (bin_name or "").strip()
        if not self._is_safe_executable_token(raw):
            return None
        resolved = self._resolve_executable_path(raw)
        if not resolved:
            return None
        return resolved if self._is_ffprobe_name(resolved) else None

    @staticmethod
    def _is_safe_executable_token(raw: str) -> bool:
        if not raw:
            return False
        if "\x00" in raw or "\n" in raw or "\r" in raw:
            return False
        if any(ch in raw for ch in ("&", "|", ";", ">", "<")):
            return False
        return True

    @staticmethod
    def _resolve_executable_path(raw: str) -> Optional[str]:
        resolved = shutil.which(raw)
        if resolved:
            return resolved
        try:
            candidate = Path(raw)
            if candidate.is_file():
                return str(candidate.resolve(strict=True))
        except (OSError, RuntimeError, ValueError):
            return None
        return None

    @staticmethod
    def _is_ffprobe_name(resolved: str) -> bool:
        return Path(resolved).name.lower().startswith("ffprobe")

    def _check_available(self) -> bool:
        resolved = self._resolve_executable(self.bin)
        if not resolved:
            return False
        self._resolved_bin = resolved
        return True

    def is_available(self) -> bool:
        """Check if ffprobe is available."""
        return self._available

    def _validate_probe_path(self, path: str) -> Result[str]:
        value = str(path or "").strip()
        if not value:
            return Result.Err(ErrorCode.INVALID_INPUT, "Empty probe path")
        if any(ch in value for ch in ("\x00", "\n", "\r")):
            return Result.Err(ErrorCode.INVALID_INPUT, "Probe path contains control characters")
        if value.startswith("-"):
            # Would be parsed as an ffprobe option.
            return Result.Err(ErrorCode.INVALID_INPUT, "Probe path looks like an option")
        return Result.Ok(value)

    def _build_ffprobe_cmd(self, path: str) -> List[str]:
        return [
            self._resolved_bin or self.bin,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            path,
        ]

    async def _spawn_ffprobe_process(self, cmd: List[str]) -> asyncio.subprocess.Process:
        return await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            close_fds=os.name != "nt",
        )

    async def _communicate_with_timeout(
        self,
        process: asyncio.subprocess.Process,
        path: str,
    ) -> Result[tuple[str, str]]:
        try:
            stdout_b, stderr_b = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            logger.warning(f"ffprobe timeout for {path}")
            return Result.Err(ErrorCode.TIMEOUT, f"ffprobe timeout after {self.timeout}s")
        stdout = (stdout_b or b"").decode("utf-8", errors="replace")
        stderr = (stderr_b or b"").decode("utf-8", errors="replace")
        return Result.Ok((stdout, stderr))

    async def aread(self, path: str) -> Result[dict]:
        """
        Read container metadata using ffprobe.

        Args:
            path: Video file path

        Returns:
            Result with metadata dict containing 'format', 'streams' and 'video_stream'
        """
        if not self._available:
            return Result.Err(ErrorCode.TOOL_MISSING, "ffprobe not found in PATH")

        validated = self._validate_probe_path(path)
        if not validated.ok:
            return Result.Err(validated.code, validated.error or "Invalid probe path")

        try:
            process = await self._spawn_ffprobe_process(self._build_ffprobe_cmd(validated.unwrap()))
            communicated = await self._communicate_with_timeout(process, path)
            if not communicated.ok:
                return Result.Err(communicated.code, communicated.error or "ffprobe communication failed")
            stdout, stderr = communicated.unwrap()
            return self._parse_ffprobe_output(stdout, stderr, process.returncode, path)
        except json.JSONDecodeError as e:
            logger.warning(f"ffprobe JSON parse error for {path}: {e}")
            return Result.Err(ErrorCode.PARSE_ERROR, f"Failed to parse ffprobe output: {e}")
        except Exception as e:
            logger.warning(f"ffprobe unexpected error for {path}: {e}")
            return Result.Err(ErrorCode.FFPROBE_ERROR, str(e))

    def _parse_ffprobe_output(
        self,
        stdout: str,
        stderr: str,
        returncode: Optional[int],
        path: str,
    ) -> Result[dict]:
        if returncode != 0:
            stderr_msg = stderr.strip()
            logger.debug(f"ffprobe error for {path}: {stderr_msg}")
            return Result.Err(ErrorCode.FFPROBE_ERROR, stderr_msg or "ffprobe command failed")
        if not stdout.strip():
            logger.debug(f"ffprobe returned empty output for {path}")
            return Result.Err(ErrorCode.FFPROBE_ERROR, "No ffprobe output")
        data = json.loads(stdout)
        if not isinstance(data, dict):
            return Result.Err(ErrorCode.PARSE_ERROR, "Invalid ffprobe output format")
        streams = data.get("streams") or []
        return Result.Ok(
            {
                "format": data.get("format") or {},
                "streams": streams,
                "video_stream": self._find_video_stream(streams),
            }
        )

    @staticmethod
    def _find_video_stream(streams: list) -> dict:
        for stream in streams:
            if isinstance(stream, dict) and stream.get("codec_type") == "video":
                return stream
        return {}

    @staticmethod
    def _coerce_duration(value) -> Optional[float]:
        if value is None or value == "" or value == "N/A":
            return None
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(seconds) or seconds < 0:
            return None
        return seconds

    async def aget_duration(self, path: str) -> Result[float]:
        """
        Get container duration in seconds.

        The format-level duration wins; the first video stream's duration is the fallback.
        """
        result = await self.aread(path)
        if not result.ok:
            return Result.Err(result.code, result.error or "ffprobe failed")

        data = result.data if isinstance(result.data, dict) else {}
        duration = self._coerce_duration((data.get("format") or {}).get("duration"))
        if duration is None:
            duration = self._coerce_duration((data.get("video_stream") or {}).get("duration"))
        if duration is None:
            return Result.Err(ErrorCode.PARSE_ERROR, "Duration not found in video metadata")
        return Result.Ok(duration)
