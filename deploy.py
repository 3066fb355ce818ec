"""
Contract Deployment Wrapper
Runs the scripts.deploy_contract module, forwarding arguments and exit code
"""

import subprocess
import sys

if __name__ == "__main__":
    print("=" * 70, file=sys.stderr)
    print("0xBin Contract Deployment", file=sys.stderr)
    print("=" * 70, file=sys.stderr)

    result = subprocess.run(
        [sys.executable, "-m", "scripts.deploy_contract", *sys.argv[1:]],
        cwd="."
    )

    sys.exit(result.returncode)
