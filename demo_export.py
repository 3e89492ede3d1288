#!/usr/bin/env python3
"""
Demo: Export example orders as delimited text.

Shows the single-record form, the multi-record form, and a
semicolon-delimited file written with a YAML-loaded config.
"""

from tabexport.config import config_from_yaml
from tabexport.examples import build_example_orders
from tabexport.serializer import TabularSerializer, save_delimited_file, to_delimited_text


CONFIG_YAML = """
delimiter: ";"
epoch_unit: seconds
missing_placeholder: "-"
"""


def main():
    orders = build_example_orders(order_count=3)

    print("=" * 80)
    print("TABULAR EXPORT DEMO")
    print("=" * 80)

    print("\nSINGLE RECORD:")
    print("-" * 80)
    print(to_delimited_text(orders[0]), end="")

    print("\nMULTIPLE RECORDS:")
    print("-" * 80)
    print(to_delimited_text(orders), end="")

    print("\nCUSTOM CONFIG (YAML):")
    print("-" * 80)
    config = config_from_yaml(CONFIG_YAML)
    print(TabularSerializer(config).to_delimited_text(orders), end="")

    filename = "orders.csv"
    save_delimited_file(orders, filename)
    print(f"\nSaved to: {filename}")
    print("=" * 80)


if __name__ == "__main__":
    main()
