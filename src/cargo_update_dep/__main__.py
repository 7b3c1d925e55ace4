from cargo_update_dep.cli import _run

if __name__ == "__main__":
    _run()
