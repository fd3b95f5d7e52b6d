"""
prompts.py

Responsibility: render the prompts sent to the language model.

Rules:
- System instructions are fixed strings.
- User prompts are Jinja2 templates rendered with StrictUndefined, so a
  missing variable is an error rather than an empty string.

This module intentionally does NOT know about HTTP or the model API.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined

from aiagent.errors import RenderError

TASKS_SYSTEM_PROMPT = (
    "You are a project planner. Return only a JSON array of tasks, with no surrounding prose, like: "
    '[{"title": "Task 1", "body": "Do this...", "acceptance_criteria": ["..."], "labels": ["..."]}, ...]'
)

README_SYSTEM_PROMPT = (
    "You are an expert open source project maintainer.\n"
    "Generate a high-quality README.md for a GitHub repository given a project name, idea, and tech stack.\n"
    "The README should include: project title, description, features, tech stack, setup instructions, "
    "and contributing guidelines."
)

TASK_PROMPT_TEMPLATE = (
    "Build '{{ idea }}'{% if stack %} using {{ stack }}{% endif %}. "
    "Break it into 5-10 atomic, actionable development tasks as JSON. "
    "Each task needs a title, a markdown body, a list of acceptance_criteria and a list of labels."
)

README_PROMPT_TEMPLATE = "Project name: {{ project_name }}\nIdea: {{ idea }}\nTech stack: {{ stack or 'unspecified' }}"

_env = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render_prompt(template_text: str, context: dict[str, Any]) -> str:
    try:
        return _env.from_string(template_text).render(**context)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(f"Failed rendering prompt: {e}") from e


def build_task_prompt(idea: str, stack: str | None = None) -> str:
    return render_prompt(TASK_PROMPT_TEMPLATE, {"idea": idea, "stack": stack or ""})


def build_readme_prompt(project_name: str, idea: str, stack: str | None = None) -> str:
    return render_prompt(
        README_PROMPT_TEMPLATE,
        {"project_name": project_name, "idea": idea, "stack": stack or ""},
    )
