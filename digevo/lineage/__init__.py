from __future__ import annotations

from digevo.lineage.ancestry import InheritanceEvent, iter_ancestry, notify_birth
from digevo.lineage.datafiles import MrcaLineageWriter
from digevo.lineage.fixation import FixationTracker
from digevo.lineage.graph import build_ancestry_graph, root_ancestors, validate_ancestry
from digevo.lineage.line_of_descent import LineOfDescent, lineage
from digevo.lineage.mrca import ShareCounter, count_shares, most_recent_common_ancestor
from digevo.lineage.persistence import (
    dumps_lineage,
    load_lineage,
    loads_lineage,
    save_lineage,
)
