"""Built-in seed dataset, used when nothing has been persisted yet.

Stored in the persisted camelCase document format and parsed on demand so
callers always get fresh, independent trees.
"""

from typing import Any

from dictionary_wiki.core.importer.json_reader import (
    parse_definition_tree,
    parse_notifications,
    parse_supporting_table,
)
from dictionary_wiki.core.tree.primitives import Tree
from dictionary_wiki.models.definition import Notification, SupportingTable

SUPPORTING_TABLES: list[dict[str, Any]] = [
    {
        "id": "auth-status-codes",
        "name": "Authorization Status Codes",
        "description": "Codes representing the status of a service authorization.",
        "headers": ["Code", "Description", "Is Final Status?"],
        "rows": [
            ["APP", "Approved", "Yes"],
            ["MOD", "Modified", "Yes"],
            ["DEN", "Denied", "Yes"],
            ["CAN", "Canceled", "Yes"],
            ["PND", "Pending", "No"],
            ["REV", "In Review", "No"],
        ],
    },
    {
        "id": "cms-compliance",
        "name": "CMS Compliance Matrix",
        "description": "Turnaround time requirements for authorizations based on state regulations.",
        "headers": ["State", "Requirement ID", "Turnaround Time (Days)", "Applies To"],
        "rows": [
            ["CA", "CA-UM-01", "5", "Standard (Non-Urgent)"],
            ["CA", "CA-UM-02", "2", "Urgent"],
            ["NY", "NY-UM-A", "7", "Standard (Non-Urgent)"],
            ["NY", "NY-UM-B", "3", "Urgent"],
            ["TX", "TX-MCR-112", "14", "Standard (Non-Urgent)"],
            ["TX", "TX-MCR-113", "1", "Urgent"],
        ],
    },
    {
        "id": "timestamp-changed",
        "name": "timestamp_changed table",
        "description": "Tracks when a specific column was last changed for a given record.",
        "headers": ["Column Name", "Description"],
        "rows": [
            ["columnname", "The name of the column that was changed."],
            ["timestamp_changed", "The date and time the change occurred."],
        ],
    },
    {
        "id": "vw-authactiontime",
        "name": "vw_authactiontime view",
        "description": "A view that consolidates various action dates for an authorization.",
        "headers": ["Column Name", "Description"],
        "rows": [
            ["modifdate", "The date the authorization was last modified."],
            ["denieddate", "The date the authorization was denied."],
            ["apprvdate", "The date the authorization was approved."],
            ["canceldate", "The date the authorization was canceled."],
            ["carvoutdate", "The date the carve-out was processed."],
        ],
    },
]

_AUTH_DECISION_REV1: dict[str, Any] = {
    "name": "Auth Decision Date",
    "module": "Authorizations",
    "keywords": ["authorization", "decision date"],
    "description": "<p>The date on which a final decision is made for an authorization request.</p>",
    "technicalDetails": (
        "<p>The decision date is stored in the "
        "<code>AUTHORIZATION_EVENTS</code> table.</p>"
    ),
    "examples": "<p>An auth is approved on 2023-10-05. The Auth Decision Date is 2023-10-05.</p>",
    "usage": "<p>Used in regulatory reports.</p>",
    "isArchived": False,
    "supportingTables": [{"id": "auth-status-codes", "name": "Authorization Status Codes"}],
}

_AUTH_DECISION_REV2: dict[str, Any] = {
    **_AUTH_DECISION_REV1,
    "keywords": ["authorization", "decision date", "approved", "denied"],
    "description": (
        "<h4>Description</h4>\n"
        "<p>The date on which a final decision is made for an authorization request. "
        "This is a critical field for tracking service level agreements (SLAs) and "
        "reporting purposes.</p>\n"
        "<h4>Logic Used</h4>\n"
        "<h5>Approved (Auth Status 1)</h5>\n"
        "<ul><li>If auth has MD NOTE then DECISION DATE = MD NOTE DATE</li>\n"
        "<li>If none of the above are true then DECISION DATE = Date Auth moved to status 1</li></ul>\n"
        "<h5>Canceled (Auth Status 6)</h5>\n"
        "<ul><li>If Auth has MD NOTE then DECISION DATE = 1st MD NOTE Create Date</li>\n"
        "<li>If no MD Note then DECISION DATE = Date auth moved to status 6</li></ul>\n"
        "<h5>Carve Outs (Auth Status C)</h5>\n"
        "<ul><li>If Auth went to status V or X then DECISION DATE = date the auth first "
        "moved to status V or X</li></ul>"
    ),
    "technicalDetails": (
        "<p>The decision date is stored in the <code>AUTHORIZATION_EVENTS</code> table.</p>\n"
        "<pre><code>SELECT decision_date\nFROM authorization_master\n"
        "WHERE auth_id = :authId;</code></pre>\n"
        "<p>The field is of type <code>DATETIME</code> and is indexed for performance.</p>"
    ),
    "examples": (
        "<p>An authorization for a 3-month physical therapy course is submitted on "
        "2023-10-01. The health plan reviews it and approves it on 2023-10-05. "
        "The Auth Decision Date is 2023-10-05.</p>"
    ),
    "usage": (
        "<p>This field is used in regulatory reports to demonstrate compliance with "
        "turnaround time requirements. It's also a key metric in operational dashboards "
        "to monitor team efficiency.</p>"
    ),
    "supportingTables": [
        {"id": "auth-status-codes", "name": "Authorization Status Codes"},
        {"id": "cms-compliance", "name": "CMS Compliance Matrix"},
    ],
}

_AUTH_DECISION_REV3: dict[str, Any] = {
    **_AUTH_DECISION_REV2,
    "keywords": ["authorization", "decision date", "approved", "denied", "SLA"],
    "usage": (
        "<p>This field is used in regulatory reports to demonstrate compliance with "
        "turnaround time requirements. It is also a key metric in operational dashboards "
        "to monitor team efficiency and SLA performance.</p>"
    ),
}

_AUTH_DECISION_REV4: dict[str, Any] = {
    **_AUTH_DECISION_REV3,
    "description": _AUTH_DECISION_REV3["description"].replace(
        "reporting purposes.</p>",
        'reporting purposes according to the <a href="#" '
        'data-supporting-table-id="cms-compliance">CMS Compliance Matrix</a>.</p>',
    ),
    "technicalDetails": (
        "<p>The decision date is primarily derived from the "
        '<a href="#" data-supporting-table-id="vw-authactiontime">vw_authactiontime</a> view.</p>\n'
        "<pre><code>SELECT COALESCE(modifdate, denieddate, apprvdate, canceldate, carvoutdate) "
        "as decision_date\nFROM vw_authactiontime\nWHERE auth_id = :authId;</code></pre>\n"
        "<p>Logic falls back to <code>AUTHORIZATION_EVENTS</code> if the view returns null. "
        'In some cases, the <a href="#" data-supporting-table-id="timestamp-changed">'
        "timestamp_changed</a> table is consulted.</p>"
    ),
    "supportingTables": [
        {"id": "auth-status-codes", "name": "Authorization Status Codes"},
        {"id": "cms-compliance", "name": "CMS Compliance Matrix"},
        {"id": "timestamp-changed", "name": "timestamp_changed table"},
        {"id": "vw-authactiontime", "name": "vw_authactiontime view"},
    ],
}


def _module(definition_id: str, name: str, module: str, children: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "id": definition_id,
        "name": name,
        "module": module,
        "keywords": [],
        "description": "",
        "revisions": [],
        "isArchived": False,
        "supportingTables": [],
        "children": children,
    }


DEFINITIONS: list[dict[str, Any]] = [
    _module(
        "1",
        "Member Management",
        "Core",
        [
            _module(
                "1.1",
                "Authorizations",
                "Member Management",
                [
                    {
                        **_AUTH_DECISION_REV4,
                        "id": "1.1.1",
                        "revisions": [
                            {
                                "ticketId": "MPM-1234",
                                "date": "2023-01-15",
                                "developer": "J. Doe",
                                "description": "Initial creation of the definition.",
                                "snapshot": _AUTH_DECISION_REV1,
                            },
                            {
                                "ticketId": "MPM-1290",
                                "date": "2023-05-20",
                                "developer": "A. Smith",
                                "description": "Added details about Canceled/Carve-Outs logic.",
                                "snapshot": _AUTH_DECISION_REV2,
                            },
                            {
                                "ticketId": "MPM-1355",
                                "date": "2023-08-01",
                                "developer": "T. Johnson",
                                "description": "Added SLA keyword and updated usage description.",
                                "snapshot": _AUTH_DECISION_REV3,
                            },
                            {
                                "ticketId": "MPM-1401",
                                "date": "2023-11-10",
                                "developer": "A. Smith",
                                "description": (
                                    "Updated technical details to reference vw_authactiontime view."
                                ),
                                "snapshot": _AUTH_DECISION_REV4,
                            },
                        ],
                    },
                    {
                        "id": "1.1.2",
                        "name": "Service Type Mapping",
                        "module": "Authorizations",
                        "keywords": ["service type", "procedure code", "mapping"],
                        "description": (
                            "<p>Defines how provider-submitted procedure codes (e.g., CPT, HCPCS) "
                            "are mapped to internal service type categories for routing and "
                            "adjudication.</p>"
                        ),
                        "technicalDetails": (
                            "<p>Mapping is managed in the <code>SERVICE_TYPE_MAP</code> table, "
                            "which joins procedure codes to service category IDs.</p>"
                        ),
                        "examples": (
                            '<p>CPT code 99213 (Office Visit) maps to the "Outpatient Visit" '
                            "service category.</p>"
                        ),
                        "usage": (
                            "<p>Ensures consistent application of benefits and rules based on "
                            "service categories rather than individual procedure codes.</p>"
                        ),
                        "revisions": [],
                        "isArchived": False,
                        "supportingTables": [],
                    },
                ],
            ),
            _module(
                "1.2",
                "Claims",
                "Member Management",
                [
                    {
                        "id": "1.2.1",
                        "name": "Claim Adjudication Status",
                        "module": "Claims",
                        "keywords": ["claim", "adjudication", "paid", "denied"],
                        "description": (
                            "<p>The final status of a claim after it has been processed by the "
                            "adjudication system.</p>"
                        ),
                        "technicalDetails": (
                            "<p>Status is stored in the <code>CLAIMS_MASTER</code> table in the "
                            "`adjudication_status` column.</p>"
                        ),
                        "examples": (
                            '<p>A claim is submitted and passes all edits. Its status becomes "Paid". '
                            "If it fails a medical necessity review, its status becomes "
                            '"Denied".</p>'
                        ),
                        "usage": (
                            "<p>Used for payment processing, generating Explanations of Payment "
                            "(EOPs), and financial reporting.</p>"
                        ),
                        "revisions": [],
                        "isArchived": True,
                        "supportingTables": [],
                    }
                ],
            ),
        ],
    ),
    _module(
        "2",
        "Provider Network",
        "Core",
        [
            {
                "id": "2.1",
                "name": "Contracted Rates",
                "module": "Provider Network",
                "keywords": ["provider", "contract", "rates", "fee schedule"],
                "description": (
                    "<p>The negotiated payment rates for services rendered by in-network "
                    "providers, as defined in their contract.</p>"
                ),
                "technicalDetails": (
                    "<p>Rates are stored in the <code>FEE_SCHEDULES</code> table, linked to a "
                    "provider contract ID.</p>"
                ),
                "examples": (
                    "<p>Dr. Smith's contract specifies a rate of $85 for a standard office "
                    "visit (CPT 99213).</p>"
                ),
                "usage": "<p>This is the primary data source for pricing claims from contracted providers.</p>",
                "revisions": [],
                "isArchived": False,
                "supportingTables": [],
            },
        ],
    ),
]

NOTIFICATIONS: list[dict[str, Any]] = [
    {
        "id": "1",
        "definitionId": "1.1.1",
        "definitionName": "Auth Decision Date",
        "message": 'The description of "Auth Decision Date" was updated.',
        "date": "2023-11-10T09:00:00+00:00",
        "read": False,
    },
    {
        "id": "2",
        "definitionId": "2.1",
        "definitionName": "Contracted Rates",
        "message": 'A new note was added to "Contracted Rates".',
        "date": "2023-11-09T09:00:00+00:00",
        "read": True,
    },
]


def seed_tree() -> Tree:
    return parse_definition_tree(DEFINITIONS)


def seed_notifications() -> tuple[Notification, ...]:
    return parse_notifications(NOTIFICATIONS)


def seed_supporting_tables() -> tuple[SupportingTable, ...]:
    return tuple(parse_supporting_table(t) for t in SUPPORTING_TABLES)
