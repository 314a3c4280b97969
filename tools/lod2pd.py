import argparse

import pandas as pd

from digevo.lineage.line_of_descent import LineOfDescent
from digevo.lineage.persistence import load_lineage


def lineage_dataframe(lod: LineOfDescent, uniq: str | None = None) -> pd.DataFrame:
    if uniq == "latest":
        lod.deduplicate_keep_latest()
    elif uniq == "earliest":
        lod.deduplicate_keep_earliest()

    rows = [
        {
            "position": i,
            "id": o.id,
            "generation": o.generation,
            "priority": o.priority,
            "fixation_time": o.fixation_time,
            "representation": o.representation,
        }
        for i, o in enumerate(lod)
    ]
    return pd.DataFrame(
        rows,
        columns=["position", "id", "generation", "priority", "fixation_time", "representation"],
    )


def main():
    parser = argparse.ArgumentParser(
        description="Convert a saved line of descent to a pandas DataFrame"
    )
    parser.add_argument("--input-file", type=str, required=True, help="Lineage file (.jsonl or .jsonl.gz)")
    parser.add_argument("--output-file", type=str, required=True, help="Output CSV file")
    parser.add_argument(
        "--uniq",
        choices=["latest", "earliest"],
        default=None,
        help="Collapse runs of identical genomes before export",
    )
    args = parser.parse_args()
    df = lineage_dataframe(load_lineage(args.input_file), uniq=args.uniq)
    df.to_csv(args.output_file, index=False)


if __name__ == "__main__":
    main()
