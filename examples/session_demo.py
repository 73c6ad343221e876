#!/usr/bin/env python3
"""
Minimal tokenflow Session Demo
- Build a producer/consumer net by hand
- Fire it until nothing is enabled
- Undo the last firing
- Autosave into a directory next to this script
"""

import logging
from pathlib import Path

from tokenflow import EventType, Session, SessionConfig
from tokenflow.persist import FileStore


def print_event(event):
    if event.type is EventType.DOCUMENT_CHANGED:
        print(f"[{event.type.value}]")
    else:
        print(f"[{event.type.value}] {event.detail}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")

    store = FileStore(Path(__file__).parent / ".autosave")
    config = SessionConfig(session_key="demo", grid=20)

    with Session(config=config, store=store) as session:
        session.events.subscribe(None, print_event)

        # ready -> produce -> buffer (capacity 2) -> consume -> done
        ready = session.add_place(40, 100)
        produce = session.add_transition(120, 100)
        buffer = session.add_place(200, 100)
        consume = session.add_transition(280, 100)
        done = session.add_place(360, 100)

        session.add_arc(ready, produce)
        session.add_arc(produce, buffer)
        session.add_arc(buffer, consume)
        session.add_arc(consume, done)
        session.set_capacity(buffer, 2)
        session.adjust_tokens(ready, 3)

        while session.enabled_transitions():
            for transition_id in session.enabled_transitions():
                session.fire(transition_id)
            print(f"Marking: {session.marking()}")

        session.undo()
        print(f"After undo: {session.marking()}")
        print(f"Content id: {session.content_id()}")
        print(f"Saved to {store.path_for(config.session_key)}")


if __name__ == "__main__":
    main()
