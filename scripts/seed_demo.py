"""
Seed script: creates two standards with requirements in mixed states and two assessments.
Run: cd backend && python ../scripts/seed_demo.py
"""
import asyncio
import os
import sys
from datetime import date
from pathlib import Path

# Ensure backend is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))
os.chdir(str(Path(__file__).resolve().parent.parent / "backend"))

from auditready.database import async_session  # noqa: E402
from auditready.models import (  # noqa: E402
    Assessment,
    Requirement,
    RequirementHistory,
    RequirementVariable,
    Standard,
)
from auditready.services.assessment_stats import refresh_progress  # noqa: E402


STANDARDS = [
    {"name": "ISO/IEC 27001", "version": "2022", "type": "framework", "category": "Information Security",
     "description": "Information security, cybersecurity and privacy protection — ISMS requirements."},
    {"name": "GDPR", "version": "2016/679", "type": "regulation", "category": "Privacy",
     "description": "EU General Data Protection Regulation."},
]

REQUIREMENTS = {
    "ISO/IEC 27001": [
        {"section": "A.5 Organizational controls", "code": "A.5.1", "name": "Policies for information security", "status": "fulfilled"},
        {"section": "A.5 Organizational controls", "code": "A.5.15", "name": "Access control", "status": "partially-fulfilled",
         "variables": [("password_min_length", "12"), ("mfa_required", "true")]},
        {"section": "A.5 Organizational controls", "code": "A.5.23", "name": "Information security for use of cloud services", "status": "not-fulfilled"},
        {"section": "A.7 Physical controls", "code": "A.7.1", "name": "Physical security perimeters", "status": "fulfilled"},
        {"section": "A.7 Physical controls", "code": "A.7.4", "name": "Physical security monitoring", "status": "not-applicable"},
        {"section": "A.8 Technological controls", "code": "A.8.13", "name": "Information backup", "status": "partially-fulfilled",
         "variables": [("backup_retention_days", "30")]},
        {"section": "A.8 Technological controls", "code": "A.8.15", "name": "Logging", "status": "fulfilled"},
    ],
    "GDPR": [
        {"section": "Chapter II Principles", "code": "Art. 5", "name": "Principles relating to processing of personal data", "status": "fulfilled"},
        {"section": "Chapter II Principles", "code": "Art. 6", "name": "Lawfulness of processing", "status": "fulfilled"},
        {"section": "Chapter IV Controller and processor", "code": "Art. 30", "name": "Records of processing activities", "status": "partially-fulfilled"},
        {"section": "Chapter IV Controller and processor", "code": "Art. 32", "name": "Security of processing", "status": "not-fulfilled"},
        {"section": "Chapter IV Controller and processor", "code": "Art. 37", "name": "Designation of the data protection officer", "status": "not-applicable"},
    ],
}

ASSESSMENTS = [
    {"name": "ISO 27001 internal audit 2026", "description": "Annual ISMS internal audit.",
     "status": "in-progress", "start_date": date(2026, 9, 1), "assessor_name": "Jane Smith",
     "standards": ["ISO/IEC 27001"]},
    {"name": "Security & privacy readiness", "description": "Combined ISO 27001 / GDPR gap analysis.",
     "status": "draft", "start_date": date(2026, 10, 1), "assessor_name": "John Doe",
     "standards": ["ISO/IEC 27001", "GDPR"]},
]


async def seed():
    async with async_session() as s:
        by_name: dict[str, Standard] = {}
        for st_data in STANDARDS:
            st = Standard(**st_data)
            s.add(st)
            by_name[st.name] = st
        await s.flush()

        req_count = 0
        for std_name, items in REQUIREMENTS.items():
            for item in items:
                item = dict(item)
                variables = item.pop("variables", [])
                req = Requirement(standard_id=by_name[std_name].id, last_assessment_date=date.today(), **item)
                s.add(req)
                await s.flush()
                for name, value in variables:
                    s.add(RequirementVariable(requirement_id=req.id, name=name, value=value))
                s.add(RequirementHistory(requirement_id=req.id, status=req.status, comment="Initial status"))
                req_count += 1

        for a_data in ASSESSMENTS:
            a_data = dict(a_data)
            standards = [by_name[n] for n in a_data.pop("standards")]
            a = Assessment(standards=standards, **a_data)
            s.add(a)
            await s.flush()
            await refresh_progress(s, a)
            print(f"Seeded assessment '{a.name}' (id={a.id}) progress={a.progress}%")

        await s.commit()
        print(f"Seeded {len(STANDARDS)} standards and {req_count} requirements")


if __name__ == "__main__":
    asyncio.run(seed())
