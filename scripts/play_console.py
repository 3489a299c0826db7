"""Play the registration and spin flow from a terminal."""

from __future__ import annotations

import logging

from prizewheel.config import WheelSettings
from prizewheel.controller import SpinController
from prizewheel.db.engine import get_sessionmaker, make_engine
from prizewheel.errors import PrizeWheelError
from prizewheel.models import Base
from prizewheel.notifications import NotificationKind
from prizewheel.store import RecordStore
from prizewheel.wheel.state import Phase, VisitorState


class ConsoleNotifier:
    def notify(self, kind: NotificationKind, title: str, message: str) -> None:
        marker = "!!" if kind is NotificationKind.ERROR else "**"
        print(f"{marker} {title}: {message}")


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    settings = WheelSettings.from_env()
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(engine)

    controller = SpinController(
        RecordStore(get_sessionmaker(engine)), ConsoleNotifier(), settings
    )
    state = VisitorState()
    try:
        controller.load_last_winner(state)
    except PrizeWheelError:
        pass
    if state.last_award is not None:
        print(f"Last winner: {state.last_award.to_json()['name']} - {state.last_award.prize_label}")

    while True:
        prompt = "Spin again" if state.respin_allowed else "Register and spin"
        print(f"\n== {prompt} (empty name to quit) ==")
        name = input(f"Full name [{state.name}]: ").strip() or state.name
        if not name:
            break
        national_id = input(f"National ID [{state.national_id}]: ").strip() or state.national_id
        phone = None
        if settings.collect_phone:
            phone = input(f"Phone [{state.phone_number}]: ").strip() or state.phone_number

        try:
            controller.submit(state, name, national_id, phone)
            print(f"The wheel is spinning... slice {state.selected_prize_index + 1}")
            controller.on_spin_settled(state)
        except PrizeWheelError:
            while state.phase is Phase.SAVE_FAILED and input("Retry saving? [y/N] ").lower() == "y":
                try:
                    controller.retry_save(state)
                except PrizeWheelError:
                    continue
            if state.phase is not Phase.CONFIRMING:
                continue

        if state.phase is Phase.CONFIRMING:
            input("Press Enter to confirm your prize...")
            controller.poll(state)
            try:
                link = controller.confirm_redemption(state)
            except PrizeWheelError:
                continue
            print(f"Open this link to contact us: {link.uri}")

    engine.dispose()


if __name__ == "__main__":
    main()
