"""
Offline console demo: drives the booking and admin desks from the terminal.

Runs entirely on the in-memory store seeded with the studio's default
services and hours. No database, no web server.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --scenario race
    python console_demo.py --scenario blocked
"""

import argparse
import shlex
import threading
from datetime import date, timedelta
from typing import Callable, Optional

from scheduler.api.admin_desk import AdminDesk
from scheduler.api.booking_desk import BookingDesk
from scheduler.api.responses import DeskResponse
from scheduler.config import settings
from scheduler.core import create_core
from scheduler.utils import (
    format_duration,
    format_price,
    format_time_12h,
    parse_time_of_day,
    weekday_index,
)

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

HELP = """\
  services                                   list bookable services
  slots <date> <service>                     open start times
  book <date> <service> <HH:MM> <name> <email> <phone>
  show <booking-id>                          look up a booking
  complete <booking-id> | cancel <booking-id>
  block <date> [<HH:MM> <HH:MM>] [reason]    all day, or a partial block
  schedule <date>                            admin day grid
  dashboard                                  admin summary
  quit"""


class ConsoleSession:
    """A customer desk and an admin desk over one fresh in-memory core."""

    def __init__(self) -> None:
        self.core = create_core()
        self.desk = BookingDesk(self.core)
        self.admin = AdminDesk(self.core)

    def say(self, text: str) -> None:
        print(f"{GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def report(self, response: DeskResponse) -> None:
        colour = GREEN if response.ok else (YELLOW if response.status_code == 409 else RED)
        print(f"{colour}{BOLD}[{response.status_code} {response.outcome.value}]{RESET} "
              f"{colour}{response.message}{RESET}")
        for error in response.errors:
            self.system_log(error)
        self.system_log(f"request {response.request_id}")

    def next_open_day(self, weekday: int) -> date:
        """The first future date (0=Sunday) with that weekday, never today."""
        today = self.core.calendar.today()
        offset = (weekday - weekday_index(today)) % 7 or 7
        return today + timedelta(days=offset)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def show_services(self) -> None:
        for service in self.desk.list_services().services:
            print(f"  {BOLD}{service.id:<16}{RESET} {service.name:<18} "
                  f"{format_price(service.price):>8}  {format_duration(service.duration_minutes)}")

    def show_slots(self, day: str, service_id: str) -> None:
        response = self.desk.get_availability(day, service_id)
        self.report(response)
        if response.slots:
            print("  " + "  ".join(format_time_12h(parse_time_of_day(s)) for s in response.slots))

    def book(self, day: str, service_id: str, start: str, name: str, email: str, phone: str) -> Optional[str]:
        response = self.desk.create_booking({
            "service_id": service_id,
            "date": day,
            "start_time": start,
            "customer_name": name,
            "customer_email": email,
            "customer_phone": phone,
        })
        self.report(response)
        return response.booking.id if response.booking else None

    def show_booking(self, booking_id: str) -> None:
        response = self.desk.get_booking(booking_id)
        self.report(response)
        if response.booking:
            b = response.booking
            self.system_log(
                f"{b.service.name} for {b.customer.name} at {response.starts_at.isoformat()}"
            )

    def set_status(self, booking_id: str, status: str) -> None:
        self.report(self.admin.update_booking_status(booking_id, status))

    def block(self, day: str, *rest: str) -> None:
        payload = {"date": day, "all_day": True}
        if len(rest) >= 2 and ":" in rest[0]:
            payload = {"date": day, "start_time": rest[0], "end_time": rest[1]}
            rest = rest[2:]
        if rest:
            payload["reason"] = " ".join(rest)
        self.report(self.admin.add_blocked_time(payload))

    def show_schedule(self, day: str) -> None:
        response = self.admin.day_schedule(day)
        if not response.ok:
            self.report(response)
            return
        schedule = response.schedule
        if not schedule.is_open:
            self.say(f"{schedule.day.isoformat()} closed ({schedule.closed_reason})")
            return
        for row in schedule.rows:
            detail = row.customer_name or row.reason or ""
            colour = {"open": GREEN, "booked": BLUE, "blocked": RED}.get(row.state.value, DIM)
            print(f"  {row.time}  {colour}{row.state.value:<8}{RESET} {detail}")

    def show_dashboard(self) -> None:
        summary = self.admin.dashboard().dashboard
        self.say(f"Today ({summary.today.isoformat()}): {len(summary.today_bookings)} bookings, "
                 f"{summary.completed_today} completed, {format_price(summary.today_revenue)}")
        self.say(f"This week: {summary.week_count}  Status counts: {summary.status_counts}")
        for b in summary.upcoming:
            self.system_log(f"{b.date.isoformat()} {b.start_time} {b.service.name} - {b.customer.name}")

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    def _scenario_booking(self) -> None:
        tuesday = self.next_open_day(2).isoformat()
        self.show_services()
        self.show_slots(tuesday, "regular-cut")
        booking_id = self.book(tuesday, "regular-cut", "12:30", "Marcus Hill",
                               "marcus@example.com", "(334) 555-0142")
        self.show_slots(tuesday, "regular-cut")
        self.book(tuesday, "skin-fade", "12:45", "Dana Cole",
                  "dana@example.com", "334-555-0199")
        if booking_id:
            self.show_booking(booking_id)
            self.set_status(booking_id, "completed")
            self.set_status(booking_id, "cancelled")
        self.show_schedule(tuesday)

    def _scenario_race(self) -> None:
        saturday = self.next_open_day(6).isoformat()
        results: list[DeskResponse] = []

        def attempt(name: str) -> None:
            results.append(self.desk.create_booking({
                "service_id": "regular-cut",
                "date": saturday,
                "start_time": "10:00",
                "customer_name": name,
                "customer_email": f"{name.lower()}@example.com",
                "customer_phone": "334-555-0100",
            }))

        threads = [threading.Thread(target=attempt, args=(n,)) for n in ("Alex", "Blake")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        for response in results:
            self.report(response)
        self.show_slots(saturday, "regular-cut")

    def _scenario_blocked(self) -> None:
        wednesday = self.next_open_day(3).isoformat()
        thursday = self.next_open_day(4).isoformat()
        self.block(wednesday, "10:00", "11:30", "Supply delivery")
        self.show_slots(wednesday, "haircut-beard")
        self.block(thursday, "Staff training")
        self.show_slots(thursday, "regular-cut")
        self.show_schedule(thursday)
        self.show_slots(self.next_open_day(1).isoformat(), "regular-cut")

    SCENARIOS: dict[str, str] = {
        "booking": "_scenario_booking",
        "race": "_scenario_race",
        "blocked": "_scenario_blocked",
    }

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        method = self.SCENARIOS.get(scenario)
        if not method:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  STUDIO SCHEDULER - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Business: {settings.business.name} ({settings.business.timezone}){RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

        getattr(self, method)()

        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def run(self) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  STUDIO SCHEDULER - Console Demo{RESET}")
        print(f"{BOLD}  Business: {settings.business.name}{RESET}")
        print(f"{BOLD}  Type 'help' for commands, 'quit' to exit{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

        commands: dict[str, Callable[..., None]] = {
            "services": self.show_services,
            "slots": self.show_slots,
            "book": self.book,
            "show": self.show_booking,
            "complete": lambda booking_id: self.set_status(booking_id, "completed"),
            "cancel": lambda booking_id: self.set_status(booking_id, "cancelled"),
            "block": self.block,
            "schedule": self.show_schedule,
            "dashboard": self.show_dashboard,
        }

        while True:
            try:
                words = shlex.split(input(f"\n{BLUE}> {RESET}"))
            except ValueError as exc:
                print(f"{RED}{exc}{RESET}")
                continue
            except EOFError:
                return
            if not words:
                continue
            name, args = words[0].lower(), words[1:]
            if name in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return
            if name == "help":
                print(HELP)
                continue
            command = commands.get(name)
            if command is None:
                print(f"{RED}Unknown command '{name}'. Type 'help'.{RESET}")
                continue
            try:
                command(*args)
            except TypeError:
                print(f"{RED}Wrong arguments for '{name}'. Type 'help'.{RESET}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
