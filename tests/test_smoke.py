"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import receiptag
    import receiptag.application.receipts
    import receiptag.cli.main
    import receiptag.domain
    import receiptag.receipt
    import receiptag.runtime

    assert receiptag.__version__
    assert receiptag.application.receipts is not None
    assert receiptag.cli.main is not None
    assert receiptag.domain is not None
    assert receiptag.receipt is not None
    assert receiptag.runtime is not None
