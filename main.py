"""
Run the renderer from a source checkout without installing it.

    $ python main.py camera assets/african_head.obj --texture assets/african_head_diffuse.tga --preview
"""
import sys

from tinyrender.cli import main

if __name__ == "__main__":
    sys.exit(main())
