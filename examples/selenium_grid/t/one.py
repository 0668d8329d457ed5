"""A TAP test that drives a browser on the grid."""

import os
import sys

from tap.tracker import Tracker

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from session import create_session  # noqa: E402

SUITE = "grid"


def main() -> int:
    tracker = Tracker(streaming=True, stream=sys.stdout)
    tracker.set_plan(2)
    try:
        driver = create_session()
    except Exception as e:
        tracker.add_not_ok(SUITE, "session created", diagnostics=f"# {e}")
        tracker.add_skip(SUITE, "blank page has no title", "no session")
        tracker.generate_tap_reports()
        return 1

    try:
        tracker.add_ok(SUITE, "session created")
        driver.get("about:blank")
        ok = driver.title == ""
        if ok:
            tracker.add_ok(SUITE, "blank page has no title")
        else:
            tracker.add_not_ok(SUITE, "blank page has no title")
        return 0 if ok else 1
    finally:
        tracker.generate_tap_reports()
        driver.quit()


if __name__ == "__main__":
    sys.exit(main())
