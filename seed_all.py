"""
Master Database Seeding Script
Creates database tables and populates them with demo users, teams and tasks
"""

from datetime import datetime, timedelta

from create_tables import create_tables
from app.database import SessionLocal
from app.models import Task, Team, TaskPriority, UserRole
from app.schemas.tokens import Identity
from app.services.task_service import TaskService
from app.services.team_service import TeamService
from app.services.user_service import UserService
from app.utils.errors import Conflict

DEMO_USERS = [
    {"name": "Rajesh Kumar", "email": "rajesh.kumar@company.com", "role": UserRole.MANAGER},
    {"name": "Priya Sharma", "email": "priya.sharma@company.com", "role": UserRole.EMPLOYEE},
    {"name": "Arjun Singh", "email": "arjun.singh@company.com", "role": UserRole.EMPLOYEE},
    {"name": "Suresh Gupta", "email": "suresh.gupta@company.com", "role": UserRole.MANAGER},
    {"name": "Kavya Nair", "email": "kavya.nair@company.com", "role": UserRole.EMPLOYEE},
]

# Team name -> lead email, member emails
DEMO_TEAMS = {
    "Engineering": ("rajesh.kumar@company.com", ["priya.sharma@company.com", "arjun.singh@company.com"]),
    "Marketing": ("suresh.gupta@company.com", ["kavya.nair@company.com"]),
}

# Title, description, team, assignee email (or None), days until due (or None), priority
DEMO_TASKS = [
    ("Fix login bug", "Session cookie is not cleared on logout in Safari", "Engineering",
     "priya.sharma@company.com", 2, TaskPriority.HIGH),
    ("Database backups", "Schedule nightly backups for the production database", "Engineering",
     "arjun.singh@company.com", 7, TaskPriority.MEDIUM),
    ("Refactor API client", "Replace ad-hoc fetch calls with a shared client", "Engineering",
     None, None, TaskPriority.LOW),
    ("Q3 campaign brief", "Draft the brief for the Q3 product campaign", "Marketing",
     "kavya.nair@company.com", 5, TaskPriority.MEDIUM),
]

DEMO_PASSWORD = "password123"


def seed_demo_users(db):
    print(f"\n{'='*60}")
    print("🚀 Creating Demo Users")
    print(f"{'='*60}")
    service = UserService(db)
    for user_data in DEMO_USERS:
        try:
            service.create_user(password=DEMO_PASSWORD, **user_data)
            print(f"[SUCCESS] Created user: {user_data['name']} ({user_data['role'].value})")
        except Conflict:
            print(f"[SKIP] User {user_data['email']} already exists, skipping...")


def seed_demo_teams(db):
    print(f"\n{'='*60}")
    print("🚀 Creating Demo Teams")
    print(f"{'='*60}")
    users = UserService(db)
    teams = TeamService(db)
    for name, (lead_email, member_emails) in DEMO_TEAMS.items():
        lead = users.get_by_email(lead_email)
        member_ids = [users.get_by_email(email).id for email in member_emails]
        try:
            teams.create_team(name, lead_id=lead.id, member_ids=member_ids)
            print(f"[SUCCESS] Created team: {name} ({len(member_ids)} members)")
        except Conflict:
            print(f"[SKIP] Team {name} already exists, skipping...")


def seed_demo_tasks(db):
    print(f"\n{'='*60}")
    print("🚀 Creating Demo Tasks")
    print(f"{'='*60}")
    users = UserService(db)
    tasks = TaskService(db)
    for title, description, team_name, assignee_email, due_in_days, priority in DEMO_TASKS:
        team = db.query(Team).filter(Team.name == team_name).first()
        if db.query(Task).filter(Task.title == title, Task.team_id == team.id).first():
            print(f"[SKIP] Task {title} already exists, skipping...")
            continue
        creator = users.get_user(team.lead_id)
        assignee = users.get_by_email(assignee_email) if assignee_email else None
        due_date = datetime.utcnow() + timedelta(days=due_in_days) if due_in_days is not None else None
        tasks.create_task(
            Identity(id=creator.id, role=creator.role),
            title=title,
            description=description,
            team_id=team.id,
            assigned_to=assignee.id if assignee else None,
            due_date=due_date,
            priority=priority,
        )
        print(f"[SUCCESS] Created task: {title}")


def main():
    create_tables()
    db = SessionLocal()
    try:
        seed_demo_users(db)
        seed_demo_teams(db)
        seed_demo_tasks(db)
    finally:
        db.close()
    print(f"\n{'='*60}")
    print(f"Demo password for every seeded user: {DEMO_PASSWORD}")


if __name__ == "__main__":
    main()
