#
# src/fwharness/stub.py
#
"""
Source collection and generation of the test provider stub.

The stub defines registerProviders(), which the fixed harness main routine
calls to obtain the list of tests. Each test source file contributes one
provider function named after the file.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

import structlog

log = structlog.get_logger("stub")

PROVIDER_SUFFIX = "Tests"

STUB_TEMPLATE = """\
// THIS IS AUTOGENERATED FILE
// This method is invoked by the main routine to get a list of tests
func registerProviders() {{
{calls}
}}
"""


class Language(Enum):
    KOTLIN = ".kt"
    OBJC = ".m"
    SWIFT = ".swift"

    @property
    def extension(self) -> str:
        return self.value


def collect_sources(paths: Iterable[str | Path], language: Language) -> list[Path]:
    """
    Expands declared source entries into files.

    Files are kept as given. Directories contribute every file with the
    language extension below them, sorted by path. Declaration order of the
    entries is preserved.
    """
    files: list[Path] = []
    for entry in paths:
        path = Path(entry)
        if path.is_dir():
            found = sorted(p for p in path.rglob(f"*{language.extension}") if p.is_file())
            log.debug("Expanded source directory", directory=str(path), files=len(found))
            files.extend(found)
        else:
            files.append(path)
    return files


def provider_name(source: str | Path) -> str:
    """
    'foo.swift' -> 'FooTests'. A stem that already ends with the suffix is
    not suffixed twice, so 'barTests.swift' -> 'BarTests'.
    """
    stem = Path(source).stem
    name = stem[:1].upper() + stem[1:]
    if not name.endswith(PROVIDER_SUFFIX):
        name += PROVIDER_SUFFIX
    return name


def generate_provider_stub(test_sources: Sequence[str | Path]) -> str:
    """Returns the stub text; calls follow the order of test_sources."""
    calls = "\n".join(f"    {provider_name(source)}()" for source in test_sources)
    return STUB_TEMPLATE.format(calls=calls)


def write_provider_stub(stub_path: Path, test_sources: Sequence[str | Path]) -> Path:
    """Writes the stub, replacing whatever was at stub_path before."""
    text = generate_provider_stub(test_sources)
    stub_path.parent.mkdir(parents=True, exist_ok=True)
    stub_path.write_text(text, encoding="utf-8")
    log.info("Wrote provider stub", path=str(stub_path), providers=len(test_sources), emoji_key="build")
    return stub_path

# 🔼⚙️
