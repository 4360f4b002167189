import argparse
import time

from event_attributes import (
    SpecVersion,
    collect_attributes,
    convert,
    new_attributes,
    populate_attributes,
)


def benchmark(num_sets: int):
    print(f"Benchmarking with {num_sets} attribute sets...")

    def run_mode(spec_version: SpecVersion, num_sets: int):
        config = {"default_source": "https://bench.example", "default_type": "Bench"}

        # --- Construction benchmark ---
        start = time.perf_counter()
        all_sets = [new_attributes(spec_version, config) for _ in range(num_sets)]
        build_time = time.perf_counter() - start

        # --- Iteration benchmark ---
        start = time.perf_counter()
        for attributes in all_sets:
            for _ in attributes:
                pass
        iterate_time = time.perf_counter() - start

        # --- Visitor round trip benchmark ---
        # Each set is consumed by the export, so round-trip into fresh sets.
        start = time.perf_counter()
        rebuilt = [
            populate_attributes(spec_version, collect_attributes(attributes).items())
            for attributes in all_sets
        ]
        round_trip_time = time.perf_counter() - start

        # --- Conversion benchmark ---
        other = SpecVersion.V10 if spec_version is SpecVersion.V03 else SpecVersion.V03
        start = time.perf_counter()
        converted = [convert(attributes, other) for attributes in rebuilt]
        convert_time = time.perf_counter() - start

        assert len(converted) == num_sets
        return build_time, iterate_time, round_trip_time, convert_time

    print(f"\n--- Results for {num_sets} sets ---")
    for spec_version in SpecVersion:
        build_time, iterate_time, round_trip_time, convert_time = run_mode(spec_version, num_sets)
        throughput = num_sets / round_trip_time if round_trip_time > 0 else 0
        print(
            f"specversion {spec_version} - Build: {build_time:.4f}s, Iterate: {iterate_time:.4f}s, "
            f"Round trip: {round_trip_time:.4f}s ({throughput:,.0f} sets/s), Convert: {convert_time:.4f}s"
        )


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--num-sets", type=int, default=1000)
    args = parser.parse_args()
    benchmark(args.num_sets)


if __name__ == "__main__":
    main()
