"""
ETL pipeline orchestration.

Runs each step through its phases:
1. Read named inputs (drug_index.io)
2. Transform to nested records (drug_index.transforms)
3. Write named outputs

Provides:
- Interactive dashboard with live status
- Selective step execution

Usage:
    from drug_index.etl.runner import ETLRunner
    runner = ETLRunner()
    runner.run_interactive()
"""

from drug_index.etl.runner import ETLRunner

__all__ = ["ETLRunner"]
