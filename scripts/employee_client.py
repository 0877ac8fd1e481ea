"""
Demo client for the Employee Service.
Creates, reads, updates and deletes one employee against a running service.
"""

import json
import sys

import requests

# Configuration
API_URL = "http://localhost:8000"


def show(step: str, response: requests.Response):
    """Print a response in a readable form."""
    print(f"\n{step}")
    print(f"   Status: {response.status_code}")
    if response.content:
        print(f"   Response: {json.dumps(response.json(), indent=2)}")


def run_demo(api_url: str = API_URL):
    """Walk one employee through its whole lifecycle."""
    print(f"\n{'='*60}")
    print(f"Employee Service demo against {api_url}")
    print(f"{'='*60}")

    employee = {
        "name": "Ana Souza",
        "address": "Rua das Flores, 100",
        "extension": "4021",
        "professional_email": "ana.souza@example.com",
        "department": "HR",
        "salary": 5000
    }

    created = requests.post(f"{api_url}/employee", json=employee)
    show("1. Create", created)
    created.raise_for_status()
    location = created.headers["Location"]
    print(f"   Location: {location}")

    show("2. Read", requests.get(location))

    employee["salary"] = 6000
    show("3. Update salary", requests.put(location, json=employee))
    show("4. Read after update", requests.get(location))

    show("5. Delete", requests.delete(location))
    show("6. Read after delete", requests.get(location))


if __name__ == "__main__":
    run_demo(sys.argv[1] if len(sys.argv) > 1 else API_URL)
