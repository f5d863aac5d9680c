import textwrap
from pathlib import Path

import pytest


HOST_DOCUMENT = textwrap.dedent(
    """\
    <!DOCTYPE html>
    <html lang="en-us">
      <head>
        <meta charset="utf-8">
        <title>Game</title>
      </head>
      <body>
        <canvas id="unity-canvas" width="960" height="600"></canvas>
        <script src="Build/Game.loader.js"></script>
        <script>
          var config = {
            dataUrl: "Build/Game.data",
            frameworkUrl: "Build/Game.framework.js",
            codeUrl: "Build/Game.wasm",
            companyName: "DefaultCompany",
            productName: "Game",
          };
          createUnityInstance(document.querySelector("#unity-canvas"), config);
        </script>
      </body>
    </html>
    """
)

LOADER_JS = "function createUnityInstance(canvas, config) { return Promise.resolve(config); }\n"
FRAMEWORK_JS = "var unityFramework = function (Module) { return Module; };\n"
WASM_BYTES = b"\x00asm\x01\x00\x00\x00\xff\xfe"
DATA_BYTES = bytes(range(246, 256))


def write_build(
    root: Path,
    *,
    document: str = HOST_DOCUMENT,
    skip: tuple = (),
    extra: tuple = (),
) -> Path:
    """Create a synthetic WebGL build under ``root`` and return it."""
    build_folder = root / "Build"
    build_folder.mkdir(parents=True, exist_ok=True)
    files = {
        "index.html": (root / "index.html", document.encode("utf-8")),
        "loader": (build_folder / "Game.loader.js", LOADER_JS.encode("utf-8")),
        "framework": (build_folder / "Game.framework.js", FRAMEWORK_JS.encode("utf-8")),
        "wasm": (build_folder / "Game.wasm", WASM_BYTES),
        "data": (build_folder / "Game.data", DATA_BYTES),
    }
    for name, (path, content) in files.items():
        if name not in skip:
            path.write_bytes(content)
    for name in extra:
        (build_folder / name).write_bytes(b"extra")
    return root


@pytest.fixture
def webgl_build(tmp_path):
    return write_build(tmp_path / "SingleFileBuild")
