#!/usr/bin/env python3
import os
import sys
import traceback

# Set dummy env vars to avoid surprises during config load
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")


def main() -> int:
    print("Running preflight check...")
    try:
        import checkout_gate.main
        print("Import checkout_gate.main: OK")

        from checkout_gate.store.redis_conn import get_redis
        get_redis().ping()
        print("Redis ping: OK")

        if not checkout_gate.main.app.state.can_update_attributes:
            print("[WARN] Attribute changes unavailable: the contact form will show the warning banner.")

        print("Preflight check passed.")
        return 0
    except Exception as e:
        print(f"Preflight check FAILED: {e}")
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
