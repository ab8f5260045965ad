"""Frontend bundling through esbuild's JavaScript API.

``esbuild_runner.mjs`` performs a single build in a node subprocess and hands
the output files back in memory, so concurrent builds never share files on
disk. Every call rebuilds from scratch: no state is kept between builds, and
the node / PostCSS subprocesses run to completion on the calling thread with
no timeout.
"""

import base64
import json
import logging
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from quotesite.config import Settings, asset_source_dir

logger = logging.getLogger(__name__)

RUNNER_SCRIPT = Path(__file__).resolve().parent / "esbuild_runner.mjs"

LOADERS: Dict[str, str] = {
    ".tsx": "tsx",
    ".ts": "ts",
    ".css": "css",
    ".ttf": "text",
    ".woff2": "text",
    ".svg": "text",
}


# ── Build data types ─────────────────────────────────────────────────────────

class BuildMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    location: Optional[str] = None

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.text}"
        return self.text


class OutputFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    contents: bytes


class BuildResult(BaseModel):
    """Either output files or errors, never both."""

    errors: List[BuildMessage] = Field(default_factory=list)
    output_files: List[OutputFile] = Field(default_factory=list)

    @model_validator(mode="after")
    def _no_partial_success(self):
        if self.errors and self.output_files:
            raise ValueError("a build result carries either errors or output files, not both")
        return self

    @property
    def ok(self) -> bool:
        return not self.errors


class Plugin(BaseModel):
    """On-load hook: every file esbuild loads whose path matches ``filter`` is
    piped through ``command`` (contents on stdin, path appended as the last
    argument) and replaced by its stdout."""

    model_config = ConfigDict(frozen=True)

    name: str
    filter: str
    command: Tuple[str, ...]
    cwd: Optional[Path] = None
    loader: str = "css"

    def matches(self, path: str) -> bool:
        return re.search(self.filter, path) is not None

    def to_request(self) -> dict:
        return {
            "name": self.name,
            "filter": self.filter,
            "command": list(self.command),
            "cwd": str(self.cwd) if self.cwd is not None else None,
            "loader": self.loader,
        }


class BuildOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    outdir: Path
    entry_points: Tuple[Path, ...]
    loader: Dict[str, str] = Field(default_factory=lambda: dict(LOADERS))
    platform: str = "browser"
    bundle: bool = True
    minify_syntax: bool = True
    minify_whitespace: bool = True
    minify_identifiers: bool = True
    define: Dict[str, str] = Field(default_factory=dict)
    sourcemap: Optional[str] = None
    plugins: Tuple[Plugin, ...] = ()

    def esbuild_options(self) -> dict:
        """The options object handed to esbuild.build()."""
        options = {
            "entryPoints": [str(p) for p in self.entry_points],
            "outdir": str(self.outdir),
            "platform": self.platform,
            "bundle": self.bundle,
            "minifySyntax": self.minify_syntax,
            "minifyWhitespace": self.minify_whitespace,
            "minifyIdentifiers": self.minify_identifiers,
            "loader": dict(self.loader),
            "define": dict(self.define),
        }
        if self.sourcemap:
            options["sourcemap"] = self.sourcemap
        return options


class BuildFailure(Exception):
    """Raised when a build reports one or more errors."""

    def __init__(self, messages: Sequence[BuildMessage]):
        self.messages = list(messages)
        super().__init__(
            "failed to build package: " + "; ".join(str(m) for m in self.messages)
        )


# ── Configuration ────────────────────────────────────────────────────────────

def postcss_plugin(postcss_path: Path, cwd: Path) -> Plugin:
    """Run every CSS file through the PostCSS CLI before esbuild parses it."""
    return Plugin(name="postcss", filter=r"\.css$", command=(str(postcss_path),), cwd=cwd)


def build_options(settings: Settings) -> BuildOptions:
    """Derive the build configuration from the runtime mode.

    Minification is on everywhere except development, where an inline
    source map is emitted instead.
    """
    is_development = settings.is_development
    source_dir = asset_source_dir(settings)

    options = BuildOptions(
        outdir=source_dir / "dist",
        entry_points=(source_dir / "index.tsx", source_dir / "index.css"),
        loader=dict(LOADERS),
        minify_syntax=not is_development,
        minify_whitespace=not is_development,
        minify_identifiers=not is_development,
        define={"process.env.NODE_ENV": json.dumps(settings.NODE_ENV)},
        sourcemap="inline" if is_development else None,
        plugins=(postcss_plugin(source_dir / settings.POSTCSS_PATH, source_dir),),
    )
    return options


# ── esbuild adapter ──────────────────────────────────────────────────────────

class EsbuildBundler:
    def __init__(self, node_binary: str, resolve_dir: Path, runner: Path = RUNNER_SCRIPT):
        self.node_binary = node_binary
        self.resolve_dir = Path(resolve_dir)
        self.runner = Path(runner)

    @classmethod
    def from_settings(cls, settings: Settings) -> "EsbuildBundler":
        return cls(settings.NODE_BINARY, asset_source_dir(settings))

    def request(self, options: BuildOptions) -> dict:
        return {
            "resolveDir": str(self.resolve_dir),
            "options": options.esbuild_options(),
            "plugins": [p.to_request() for p in options.plugins],
        }

    def build(self, options: BuildOptions) -> BuildResult:
        payload = json.dumps(self.request(options)).encode("utf-8")
        try:
            proc = subprocess.run(
                [self.node_binary, str(self.runner)],
                input=payload,
                capture_output=True,
                cwd=str(self.resolve_dir),
            )
        except OSError as e:
            return BuildResult(errors=[BuildMessage(text=f"could not run {self.node_binary}: {e}")])

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            return BuildResult(errors=[
                BuildMessage(text=stderr or f"esbuild runner exited with status {proc.returncode}")
            ])

        try:
            data = json.loads(proc.stdout)
            errors = [BuildMessage(**m) for m in data.get("errors", [])]
            if errors:
                return BuildResult(errors=errors)
            return BuildResult(output_files=[
                OutputFile(path=f["path"], contents=base64.b64decode(f["contents"]))
                for f in data.get("outputFiles", [])
            ])
        except (ValueError, KeyError, TypeError) as e:
            return BuildResult(errors=[BuildMessage(text=f"unreadable esbuild runner output: {e}")])


def build_or_raise(bundler, options: BuildOptions) -> BuildResult:
    result = bundler.build(options)
    if not result.ok:
        raise BuildFailure(result.errors)
    return result


def write_outputs(result: BuildResult) -> None:
    for output_file in result.output_files:
        path = Path(output_file.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(output_file.contents)


def build_assets(settings: Settings, bundler=None) -> BuildResult:
    """Production pre-build: write the bundle into the embedded dist directory."""
    options = build_options(settings)
    bundler = bundler or EsbuildBundler.from_settings(settings)

    logger.info("Building assets...")
    logger.info(f"  outdir: {options.outdir}")
    logger.info(f"  entrypoints: {[str(p) for p in options.entry_points]}")
    logger.info(f"  defined: {options.define}")

    try:
        result = build_or_raise(bundler, options)
    except BuildFailure as e:
        logger.error(f"[build] Failed to build package: {e}")
        raise
    write_outputs(result)
    logger.info(f"[build] Wrote {len(result.output_files)} file(s) to {options.outdir}")
    return result
