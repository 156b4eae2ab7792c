"""
Decision Loop — decision lifecycle and judgment-calibration core.

Architecture:
    decisionloop/
    ├── schemas/         # Pydantic records (Decision, Option, Outcome, Snapshot)
    ├── scoring/         # Option expected-value scoring
    ├── lifecycle/       # Status state machine, transition + mutation guards
    ├── metrics/         # Calibration & health metrics (DQI, PA, FT, RI, GM)
    ├── indices/         # Composite indices (DHI, TMS, domain strength, curve)
    ├── patterns/        # Bias detection (category calibration, failure patterns)
    ├── profile/         # Judgment profile, State-of-You, weekly review
    ├── db/              # SQLAlchemy tables, engine, repositories
    └── services/        # Outcome logging, health recalculation, insights

Module Boundaries:
    - Status is COMPUTED, never stored; every consumer calls lifecycle.compute_status
    - Every write path passes through lifecycle.validate_update first
    - Analytics are pure and identity-agnostic; callers pass owned records only
    - Metrics never raise on empty history, they return neutral defaults

Data Flow:
    Decision/Option/Outcome → Lifecycle status → Metrics → Indices/Profile
    → consumer (UI, digest e-mail, export)

Version: 1.0.0
"""

__version__ = "1.0.0"
