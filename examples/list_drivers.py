"""Print the registered drivers for a championship, by car number."""

import sys

from rookies_bot import SimGridClient


def main() -> None:
    if len(sys.argv) != 3:
        print("usage: list_drivers.py <simgrid-token> <championship-id>")
        sys.exit(2)
    token, championship_id = sys.argv[1:]

    with SimGridClient(token) as sg:
        lookup = sg.build_driver_lookup(championship_id)
        print(f"=== {len(lookup)} drivers ===")
        for car_number in sorted(lookup):
            d = lookup[car_number]
            print(f"  #{car_number:03d} {d.full_name} (@{d.discord_handle})")

        races = sg.championship(championship_id).races
        print(f"\n=== {len(races)} races ===")
        for number, race in enumerate(races, start=1):
            print(f"  Round {number}: {race.track}")


if __name__ == "__main__":
    main()
