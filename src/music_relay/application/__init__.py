"""
Application Layer

Orchestrates domain objects and infrastructure adapters to fulfil use cases.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: The playback engine
- commands/: Chat command routing
"""
