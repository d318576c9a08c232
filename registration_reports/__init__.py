"""
Registration Reports: admin reporting backend

Loads approved and pending registrations from the hosted backend, filters
the approved set by approval date, and produces dashboard-ready summary
metrics and tables.

To switch data sources:
    Set REPORT_SOURCE to "postgres" (with DATABASE_URL), "snapshot" (with
    SNAPSHOT_PATH pointing at an Excel export) or "demo". Every source
    returns frames in the same column schema (config.REGISTRATION_COLUMNS).

To connect to Streamlit:
    Keep a state.ReportState per session, call load() once, then
    report() on every rerun and pass the result to the dashboard helpers.

To change the performance grade:
    Edit config.PERFORMANCE_THRESHOLDS.
"""
