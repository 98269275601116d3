#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP, mock collaborators).

Usage:
  python3 scripts/book_local.py [session_id]

Commands:
  svc <item_id> <qty>     set a service quantity (0 removes)
  ext <extra_id> <qty>    set an extra quantity (0 removes)
  date YYYY-MM-DD         pick a date
  time HH:MM              pick a time slot
  addr <saved_id>         use a saved address
  newaddr                 enter an inline address
  notes <text>            set notes
  next | prev | goto <step>
  data                    show reference data for the current step
  pay | paid | close | fail | retry
  clear | /quit
"""

from __future__ import annotations

import sys
import uuid
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.exceptions import CollaboratorUnavailableError, InvalidSelectionError
from app.application.use_cases.booking_wizard import BookingWizard, CustomerContext
from app.application.utils.schedule import format_slot
from app.domain.entities.booking_draft import NewAddress, WizardStep
from app.wiring.dependencies import open_wizard


def _print_view(wizard: BookingWizard) -> None:
    view = wizard.view()
    draft = view.draft
    print("-" * 60)
    print(f"[{view.step.value}] {view.title} - {view.description}")
    print(f"services: {[(s.service_item_id, s.quantity) for s in draft.services]}")
    print(f"extras:   {[(e.service_extra_id, e.quantity) for e in draft.extras]}")
    print(f"schedule: {draft.service_date or '-'} {format_slot(draft.service_time) if draft.service_time else '-'}")
    print(f"address:  {draft.address_id or (draft.new_address.name if draft.new_address else '-')}")
    print(f"next allowed: {view.can_go_next}  payment: {view.payment.status.value}")
    if view.payment.error_message:
        print(f"payment error ({view.payment.error_kind}): {view.payment.error_message}")
    print("-" * 60)


def _prompt_address() -> NewAddress:
    return NewAddress(
        name=input("label: ").strip(),
        address_line_1=input("address line 1: ").strip(),
        city=input("city: ").strip(),
        state=input("state: ").strip(),
        postal_code=input("postal code: ").strip(),
    )


def _run_command(wizard: BookingWizard, command: str, args: list[str]) -> None:
    if command == "svc":
        wizard.services.set_service_quantity(args[0], int(args[1]))
    elif command == "ext":
        wizard.services.set_extra_quantity(args[0], int(args[1]))
    elif command == "date":
        wizard.schedule.select_date(args[0])
    elif command == "time":
        wizard.schedule.select_time(args[0])
    elif command == "addr":
        wizard.address.select_saved(args[0])
    elif command == "newaddr":
        wizard.address.use_new_address(_prompt_address())
    elif command == "notes":
        wizard.review.set_notes(" ".join(args))
    elif command == "next":
        wizard.next_step()
    elif command == "prev":
        wizard.prev_step()
    elif command == "goto":
        wizard.go_to_step(WizardStep(args[0]))
    elif command == "data":
        print(wizard.load_reference_data())
    elif command == "pay":
        wizard.payment.start()
    elif command == "paid":
        booking = wizard.payment.state.booking
        wizard.payment.on_success(booking.payment_reference if booking else "")
    elif command == "close":
        wizard.payment.on_close()
    elif command == "fail":
        wizard.payment.on_error("Card declined")
    elif command == "retry":
        wizard.payment.try_again()
    elif command == "clear":
        wizard.abandon()
    else:
        print(__doc__)


def main() -> int:
    session_id = sys.argv[1] if len(sys.argv) > 1 else uuid.uuid4().hex
    wizard = open_wizard(session_id, CustomerContext(is_guest=True, email="guest@example.com"))
    print(f"session_id: {wizard.session_id}")
    _print_view(wizard)

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line:
            continue
        if line in {"/quit", "/exit"}:
            return 0
        command, *args = line.split()
        try:
            _run_command(wizard, command, args)
        except (InvalidSelectionError, CollaboratorUnavailableError, IndexError, ValueError) as e:
            print(f"! {e}")
        _print_view(wizard)


if __name__ == "__main__":
    raise SystemExit(main())
