from __future__ import annotations

import importlib.util
import time
from pathlib import Path

import pandas as pd

from bomrecon.excel.reader import frame_to_table
from bomrecon.models.comparison_result import ResultStatus
from bomrecon.services.automap import smart_auto_map
from bomrecon.services.reconciler import compare, count_by_status

"""Performance smoke test: reconcile a generated 20k-code BOM pair in memory."""

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "gen_sample_boms.py"
ROWS = 20_000


def _load_generator():
    spec = importlib.util.spec_from_file_location("gen_sample_boms", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_italian_quantity_format():
    gen = _load_generator()
    assert gen.italian_quantity(1250.5) == "1.250,50"
    assert gen.italian_quantity(12.0) == "12"


def test_compare_generated_boms_quickly():
    gen = _load_generator()
    original_rows, partial_rows = gen.generate_bom_rows(ROWS, seed=7)
    original = frame_to_table(pd.DataFrame(original_rows), "cliente.xlsx", skip_rows=1)
    partial = frame_to_table(pd.DataFrame(partial_rows), "gestionale.xlsx")
    mappings = smart_auto_map(original, partial)
    assert mappings.partial.code == "Articolo"

    start = time.perf_counter()
    results = compare(original, partial, mappings, ignore_revision=True)
    elapsed = time.perf_counter() - start

    counts = count_by_status(results)
    assert counts[ResultStatus.QUANTITY_EQUAL] > ROWS * 0.8
    assert counts[ResultStatus.QUANTITY_DIFFERENT] > 0
    assert counts[ResultStatus.ABSENT] > 0
    assert counts[ResultStatus.ABSENT_IN_ORIGINAL] == ROWS // 100
    assert counts[ResultStatus.INVALID_QUANTITY] == 0
    # lenient bound so CI stays stable
    assert elapsed < 10.0, f"compare too slow: {elapsed:.3f}s"
