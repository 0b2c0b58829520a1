import subprocess
import sys

def run(*cmd):
    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        sys.exit(e.returncode)


def fmt():
    run("black", "src", "tests")


def check():
    run("mypy", "src/cratesapi", "tests")
    run("pytest", "tests")
    run("black", "--check", "--diff", "src", "tests")


if __name__ == "__main__":
    {"fmt": fmt, "check": check}[sys.argv[1] if len(sys.argv) > 1 else "check"]()
