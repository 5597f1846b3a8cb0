import os
import stat
import sys
from pathlib import Path

import pytest

# Keep developer .env files and shell settings out of the test run
os.environ.pop("TIKA_API_KEY", None)
os.environ.pop("TIKA_OCR", None)


# Stand-in for `java -jar tika-app.jar`, driven by the same argv Tika receives:
#   $1 -Djava.awt.headless=true  $2 -jar  $3 <jar>  $4 --config=<cfg>|--version
#   $5 -t|-h|-j  $6 <input>
# It records its argv and the config it was handed next to itself.
FAKE_JAVA = r"""#!/bin/sh
here="$(dirname "$0")"
printf '%s\n' "$@" > "$here/argv.txt"
if [ "$4" = "--version" ]; then
    echo "Apache Tika 2.9.2"
    exit 0
fi
cp "${4#--config=}" "$here/config-seen.xml"
input="$6"
case "$5" in
    -t) cat "$input" ;;
    -h) printf '<html><body><p>%s</p></body></html>' "$(cat "$input")" ;;
    -j) printf '{"Content-Type": "text/plain; charset=UTF-8", "X-TIKA:Parsed-By": ["org.apache.tika.parser.DefaultParser"], "resourceName": "%s"}' "$(basename "$input")" ;;
    *) echo "Unrecognized option: $5" >&2; exit 1 ;;
esac
"""

FAKE_METADATA = {
    "Content-Type": "text/plain; charset=UTF-8",
    "X-TIKA:Parsed-By": ["org.apache.tika.parser.DefaultParser"],
}


@pytest.fixture
def fake_jar(tmp_path) -> Path:
    """A file standing in for tika-app.jar."""
    jar = tmp_path / "dist" / "tika-app-2.9.2.jar"
    jar.parent.mkdir()
    jar.write_bytes(b"PK\x03\x04 not really a jar")
    return jar


@pytest.fixture
def java_home(tmp_path, monkeypatch) -> Path:
    """JAVA_HOME whose bin/java is the FAKE_JAVA script."""
    if sys.platform == "win32":
        pytest.skip("fake java is a POSIX shell script")
    home = tmp_path / "jdk"
    java = home / "bin" / "java"
    java.parent.mkdir(parents=True)
    java.write_text(FAKE_JAVA)
    java.chmod(java.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    monkeypatch.setenv("JAVA_HOME", str(home))
    return home


@pytest.fixture
def text_file(tmp_path) -> Path:
    path = tmp_path / "notes.txt"
    path.write_text("Quarterly numbers are up.\nSecond line.\n", encoding="utf-8")
    return path
