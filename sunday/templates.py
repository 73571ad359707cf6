"""Board templates that ship with the client."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


def template_column(key: str, title: str, column_type: str, **settings) -> Dict:
    return {
        "column_key": key,
        "title": title,
        "column_type": column_type,
        "settings": settings,
    }


def _labels(*entries) -> List[Dict]:
    labels = []
    for entry in entries:
        label_id, label, color = entry[:3]
        data = {"id": label_id, "label": label, "color": color}
        if len(entry) > 3 and entry[3]:
            data["is_done"] = True
        labels.append(data)
    return labels


@dataclass
class BuiltinTemplate:
    id: str
    name: str
    description: str
    icon: str
    columns: List[Dict] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)


BUILTIN_TEMPLATES: List[BuiltinTemplate] = [
    BuiltinTemplate(
        id="leads_pipeline",
        name="Leads Pipeline",
        description="Track and manage sales leads",
        icon="leaderboard",
        columns=[
            template_column(
                "status",
                "Status",
                "status",
                labels=_labels(
                    ("new", "New Lead", "#579bfc"),
                    ("contacted", "Contacted", "#fdab3d"),
                    ("qualified", "Qualified", "#00c875"),
                    ("proposal", "Proposal Sent", "#a25ddc"),
                    ("won", "Won", "#037f4c", True),
                    ("lost", "Lost", "#e2445c"),
                ),
            ),
            template_column("person", "Owner", "person"),
            template_column("contact_name", "Contact Name", "text"),
            template_column("phone", "Phone", "phone"),
            template_column("email", "Email", "email"),
            template_column("value", "Deal Value", "currency"),
            template_column("close_date", "Expected Close", "date"),
            template_column(
                "source",
                "Lead Source",
                "dropdown",
                options=["Website", "Referral", "Cold Call", "Advertisement", "Other"],
            ),
        ],
        groups=["New Leads", "In Progress", "Closed Won", "Closed Lost"],
    ),
    BuiltinTemplate(
        id="jobs_tracking",
        name="Jobs Tracking",
        description="Track chimney inspection and repair jobs",
        icon="work",
        columns=[
            template_column(
                "status",
                "Status",
                "status",
                labels=_labels(
                    ("scheduled", "Scheduled", "#579bfc"),
                    ("in_progress", "In Progress", "#fdab3d"),
                    ("completed", "Completed", "#00c875", True),
                    ("cancelled", "Cancelled", "#e2445c"),
                ),
            ),
            template_column("technician", "Technician", "technician"),
            template_column("customer", "Customer", "text"),
            template_column("address", "Address", "location"),
            template_column("phone", "Phone", "phone"),
            template_column("job_date", "Job Date", "date"),
            template_column(
                "job_type",
                "Job Type",
                "dropdown",
                options=["Inspection", "Cleaning", "Repair", "Installation", "Emergency"],
            ),
            template_column("workiz_job", "Workiz Job", "workizJob"),
            template_column("notes", "Notes", "longText"),
        ],
        groups=["This Week", "Next Week", "Completed", "Cancelled"],
    ),
    BuiltinTemplate(
        id="tasks",
        name="Task Management",
        description="General task tracking board",
        icon="task_alt",
        columns=[
            template_column(
                "status",
                "Status",
                "status",
                labels=_labels(
                    ("todo", "To Do", "#579bfc"),
                    ("working", "Working On It", "#fdab3d"),
                    ("stuck", "Stuck", "#e2445c"),
                    ("done", "Done", "#00c875", True),
                ),
            ),
            template_column("person", "Assigned To", "person"),
            template_column("priority", "Priority", "priority"),
            template_column("due_date", "Due Date", "date"),
            template_column("tags", "Tags", "tags"),
        ],
        groups=["To Do", "In Progress", "Done"],
    ),
    BuiltinTemplate(
        id="projects",
        name="Project Tracker",
        description="Track project milestones and progress",
        icon="folder_special",
        columns=[
            template_column(
                "status",
                "Status",
                "status",
                labels=_labels(
                    ("planning", "Planning", "#579bfc"),
                    ("active", "Active", "#fdab3d"),
                    ("on_hold", "On Hold", "#e2445c"),
                    ("completed", "Completed", "#00c875", True),
                ),
            ),
            template_column("owner", "Project Owner", "person"),
            template_column("timeline", "Timeline", "dateRange"),
            template_column("progress", "Progress", "progress"),
            template_column("budget", "Budget", "currency"),
            template_column("priority", "Priority", "priority"),
        ],
        groups=["Active Projects", "Planning", "Completed"],
    ),
]


def builtin_template(template_id: str) -> Optional[BuiltinTemplate]:
    for template in BUILTIN_TEMPLATES:
        if template.id == template_id:
            return template
    return None
