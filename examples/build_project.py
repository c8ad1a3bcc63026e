"""Generate an ESP-IDF project from a YAML device description.

Usage::

    python examples/build_project.py examples/living_room.yaml build/living_room
"""

import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from firmgen.export import to_cmake_lists, to_main_cpp, to_sdkconfig
from firmgen.framework import ConfigurationError, generate_code
from firmgen.loader import load_configuration


def build(config_path: Path, out_dir: Path) -> None:
    config = load_configuration(config_path)
    unit = generate_code(config)

    (out_dir / "main").mkdir(parents=True, exist_ok=True)
    (out_dir / "CMakeLists.txt").write_text(to_cmake_lists(config))
    (out_dir / "sdkconfig.defaults").write_text(to_sdkconfig(config))
    (out_dir / "main" / "CMakeLists.txt").write_text(
        'idf_component_register(SRCS "main.cpp" INCLUDE_DIRS ".")\n'
    )
    (out_dir / "main" / "main.cpp").write_text(to_main_cpp(unit, config))

    print(f"Device:   {config.device.name}")
    print(f"Board:    {unit.board}")
    print(f"Includes: {len(unit.includes)}")
    print("Entities:")
    for e in unit.entities:
        print(f"  {e.role:<14s} {e.id:<28s} key={e.key}")
    for a in unit.advisories:
        print(f"warning: {a.component}: {a.message}")
    print(f"Wrote {out_dir}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    try:
        build(Path(sys.argv[1]), Path(sys.argv[2]))
    except ConfigurationError as e:
        print(f"error [{e.kind}]: {e}", file=sys.stderr)
        sys.exit(1)
    except ValidationError as e:
        print(f"error [schema]: {e}", file=sys.stderr)
        sys.exit(1)
