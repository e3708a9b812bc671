"""
Fogwalk — build_exe.py
PyInstaller build script to bundle the game into a standalone executable.
Run via python build_exe.py
"""

import os
from pathlib import Path
import PyInstaller.__main__

def build():
    project_root = Path(__file__).parent.resolve()

    # --add-data uses os.pathsep between source and destination (";" on Windows, ":" elsewhere)
    args = [
        str(project_root / "run.py"),
        "--name", "Fogwalk",
        "--onefile",
        "--windowed", # no console window behind the game
        f"--add-data={project_root / 'data'}{os.pathsep}data",
        "--clean",
        "-y" # overwrite dist/ without asking
    ]

    print(f"Running PyInstaller with args: {args}")
    PyInstaller.__main__.run(args)
    print("\nBuild complete. Check the `dist/` folder for the Fogwalk executable")

if __name__ == "__main__":
    build()
