#!/usr/bin/env python
"""
Convenience launcher for demos.

Run specific demo:
  python run_demo.py cross_section rho --dimen Y --show
  python run_demo.py tests

Or run from demos folder:
  python demos/demo_cross_section.py
"""

import sys
from pathlib import Path

DEMO_DIR = Path(__file__).parent / "demos"

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

def main():
    if len(sys.argv) < 2:
        print("Available demos:")
        print("  python run_demo.py cross_section [field] [options]")
        print("  python run_demo.py tests")
        print("\nOr run directly:")
        print("  python demos/demo_cross_section.py --help")
        print("  python -m pytest src/test/")
        sys.exit(1)
    
    demo = sys.argv[1].lower()
    
    if demo == "tests":
        import pytest
        sys.exit(pytest.main([str(Path(__file__).parent / "src" / "test"), "-v"]))

    demo_file = DEMO_DIR / f"demo_{demo}.py"
    if not demo_file.exists():
        print(f"Unknown demo: {demo}")
        sys.exit(1)
    
    # Pass remaining arguments through to the demo
    sys.argv = [str(demo_file)] + sys.argv[2:]

    # Execute the demo
    with open(demo_file) as f:
        code = f.read()
    
    exec(code, {"__name__": "__main__", "__file__": str(demo_file)})

if __name__ == "__main__":
    main()
