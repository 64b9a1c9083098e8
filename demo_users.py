"""
Demo Users Data for the Helpdesk Application
One HR and one IT resolver plus employees arranged under a manager
"""

# Every demo account shares this password
DEMO_PASSWORD = "Password@123"

# manager_username refers to a user earlier in the list
DEMO_USERS = [
    {
        "username": "hr",
        "email": "hr@example.com",
        "name": "HR Desk",
        "user_type": "HR",
        "manager_username": None,
    },
    {
        "username": "it",
        "email": "it@example.com",
        "name": "IT Desk",
        "user_type": "IT",
        "manager_username": None,
    },
    {
        "username": "employee1",
        "email": "employee1@example.com",
        "name": "Priya Sharma",
        "user_type": "EMPLOYEE",
        "manager_username": None,
    },
    {
        "username": "employee2",
        "email": "employee2@example.com",
        "name": "Arjun Singh",
        "user_type": "EMPLOYEE",
        "manager_username": "employee1",
    },
    {
        "username": "employee3",
        "email": "employee3@example.com",
        "name": "Sneha Patel",
        "user_type": "EMPLOYEE",
        "manager_username": "employee1",
    },
    {
        "username": "employee4",
        "email": "employee4@example.com",
        "name": "Rahul Verma",
        "user_type": "EMPLOYEE",
        "manager_username": "employee2",
    },
]
