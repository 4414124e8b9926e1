import json
import os
from dataclasses import dataclass

import structkv


@dataclass
class Point:
    x: int
    y: int


def read_config():
    current_dir = os.path.dirname(os.path.abspath(__file__))
    return structkv.load_config(os.path.join(current_dir, 'store.yaml'))


if __name__ == "__main__":
    cfg = read_config()
    structkv.create_table(cfg.url, cfg.table)

    with structkv.open_store_from_config(cfg) as store:
        store.set("foo", Point(x=10, y=20))
        store.set("bar", Point(x=111, y=222))

        found, foo = store.get("foo", Point)
        print(f"foo: found={found} value={foo}")

        store.remove("foo")
        found, foo = store.get("foo", Point)
        print(f"foo after remove: found={found} value={foo}")

        found, bar = store.get("bar")
        print(f"bar as plain JSON: {json.dumps(bar)}")
