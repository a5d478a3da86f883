"""
Built-in Job Registry.

The tracker workbook's five curated sheets, each refreshed from its
"RAW ..." counterpart. Jobs defined in a config file are merged on top
of these by the ConfigLoader; a config job with the same name wins.
"""

from __future__ import annotations

from rawsync.domain.job_spec import DerivedFieldSpec, JobSpec, KeyPart, KeySpec


JOB_REGISTRY: dict[str, JobSpec] = {}


def _register(spec: JobSpec) -> JobSpec:
    """Register a job spec and return it."""
    JOB_REGISTRY[spec.name] = spec
    return spec


# ═══════════════════════════════════════════════════════════════════════════
# Single-field keys
# ═══════════════════════════════════════════════════════════════════════════

EC_CLOSEOUTS = _register(
    JobSpec(
        name="ECs",
        target_table="EC Closeouts",
        source_table="RAW EC Closeouts",
        key_spec=KeySpec.single("EC Number"),
        field_map=[
            "Days Due",
            "Origin Due Date",
            "EC Number",
            "Description",
            "Closeout Status",
            "Job Plan",
            "Project",
            "Engineer",
            "Task 749 Status",
            "Task 750 Documents",
            "EC Age",
            "Outstanding CRs",
        ],
        description="EC closeouts keyed by EC Number",
    )
)

ERS = _register(
    JobSpec(
        name="ERs",
        target_table="ERs",
        source_table="RAW ERs",
        key_spec=KeySpec.single("ER"),
        field_map=[
            "ER",
            "Facility",
            "ER Title",
            "Min T-Week",
            "Set to Ready TCD",
            "Due Date",
            "Workflow Status",
            "SM Due Date",
            "All Active Outages",
            "Due Date Type",
            "Earliest Outage",
            "All Active WO Types",
            "OE",
            "SM(s)",
            "Earliest WO Age",
            "Highest WO Priority",
            "Project",
        ],
        description="Engineering requests keyed by ER",
    )
)

TURNOVER = _register(
    JobSpec(
        name="Turnover",
        target_table="Turnover",
        source_table="RAW Turnover",
        key_spec=KeySpec.single("EC"),
        field_map=[
            "Days Due",
            "EC",
            "ATE Task",
            "ATE Date",
            "Mod Type",
            "EC Description",
            "Owner Name",
            "FTL Name",
            "EC Status",
            "Outage",
            "Timeline Status",
            "Status Date",
        ],
        description="EC turnovers keyed by EC",
    )
)

# ═══════════════════════════════════════════════════════════════════════════
# Composite keys
# ═══════════════════════════════════════════════════════════════════════════

CRS = _register(
    JobSpec(
        name="CRs",
        target_table="CRs",
        source_table="RAW CRs",
        key_spec=KeySpec.composite("CR# and Activity#", "CR #", "Activity #"),
        field_map=[
            "Days Due",
            "Activity Due Date",
            "Activity Lead",
            "CR Subject",
            "Activity Subject",
            "Activity Type",
            "Sig Level",
            "Activity Status",
            "CR Age",
            "Previous Extensions",
        ],
        description="CR activities keyed by CR # and Activity #",
    )
)

# "Project Name" in raw reads "<project number>: <project name>"
COMMITMENTS = _register(
    JobSpec(
        name="Commitments",
        target_table="Commitments",
        source_table="RAW Commitments",
        key_spec=KeySpec.composite(
            "Project Number - Activity ID",
            KeyPart(source_field="Project Name", delimiter=":"),
            "Activity ID",
        ),
        derived_field=DerivedFieldSpec(
            source_field="Project Name",
            delimiter=":",
            target_field="Project Name",
        ),
        field_map=[
            "Activity Name",
            "Finish",
            "Commit. Date",
            "Variance",
            "OE",
            "PCS",
            "Commit. Type",
            "Status",
        ],
        description="Commitments keyed by project number and activity ID",
    )
)


def get_job(name: str) -> JobSpec | None:
    """Look up a built-in job by name (case-insensitive)."""
    if name in JOB_REGISTRY:
        return JOB_REGISTRY[name]
    lowered = name.lower()
    for job_name, spec in JOB_REGISTRY.items():
        if job_name.lower() == lowered:
            return spec
    return None


def list_jobs() -> list[JobSpec]:
    """All built-in jobs in registration order."""
    return list(JOB_REGISTRY.values())
