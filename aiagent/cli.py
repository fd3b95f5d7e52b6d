"""
cli.py

Responsibility: CLI entrypoint for aiagent.

High-level flow (single command `init`):
1) Load configuration (env, optional .env, optional YAML file)
2) Create the GitHub repository
3) Ask the model to break the idea into tasks
4) File each task as an issue (failures are logged, not fatal)
5) (Optional) Generate a README and commit it to the default branch

This module should orchestrate behavior but keep concerns isolated:
- GitHub API: `github_client.py`, `commits.py`, `issues.py`
- Model API: `openai_client.py`
- Settings: `config.py`
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field, replace

import structlog

from aiagent.commits import commit_files
from aiagent.config import Config, load_config
from aiagent.errors import AgentError
from aiagent.github_client import GitHubClient
from aiagent.issues import FilingReport, file_tasks
from aiagent.logging_config import configure_logging
from aiagent.openai_client import OpenAIClient
from aiagent.prompts import build_task_prompt
from aiagent.tasks import File, RepoRef, Task

log = structlog.get_logger(__name__)

README_PATH = "README.md"


class CLIError(AgentError):
    pass


def slugify(text: str) -> str:
    """Lower-case and replace spaces with hyphens. Applying it twice changes nothing."""
    return text.strip().lower().replace(" ", "-")


def repo_name_for(idea: str, name: str | None = None) -> str:
    if name and slugify(name):
        return slugify(name)
    return "ai-" + slugify(idea)


@dataclass(frozen=True)
class InitOptions:
    """Everything `init` needs from the command line."""

    idea: str
    name: str | None = None
    stack: str | None = None
    readme: bool = True


@dataclass
class InitResult:
    repo: RepoRef
    tasks: list[Task] = field(default_factory=list)
    report: FilingReport = field(default_factory=FilingReport)
    readme_commits: list[str] = field(default_factory=list)


def run_init(options: InitOptions, config: Config, *, github: GitHubClient, llm: OpenAIClient) -> InitResult:
    """
    Run the whole bootstrap sequence.

    Any `AgentError` raised here is fatal to the run; per-issue failures are
    caught inside `file_tasks` and reported on the result instead.
    """
    if not options.idea.strip():
        raise CLIError("The project idea must not be empty")

    name = repo_name_for(options.idea, options.name)
    log.info("init_started", repo=name, stack=options.stack)

    repo = github.create_repo(
        name,
        private=config.private,
        auto_init=config.auto_init,
        description=options.idea,
    )
    result = InitResult(repo=repo)

    result.tasks = llm.ask_for_tasks(build_task_prompt(options.idea, options.stack))
    result.report = file_tasks(github, repo, result.tasks)
    log.info(
        "issues_filed",
        created=len(result.report.created),
        failed=len(result.report.failed),
    )

    if options.readme:
        readme = llm.generate_readme(name, options.idea, options.stack)
        result.readme_commits = commit_files(github, repo, [File(path=README_PATH, content=readme)])

    return result


def init_cmd(args: argparse.Namespace) -> int:
    # Route config errors to stderr before the configured level is known.
    configure_logging(args.log_level or "INFO", json_output=bool(args.json_logs))
    config = load_config(config_path=args.config)
    if args.private is not None:
        config = replace(config, private=bool(args.private))
    if args.auto_init is not None:
        config = replace(config, auto_init=bool(args.auto_init))

    configure_logging(args.log_level or config.log_level, json_output=bool(args.json_logs))

    github = GitHubClient(config.github_token, config.github_username, api_base=config.github_api_base)
    llm = OpenAIClient(
        config.openai_api_key,
        api_base=config.openai_api_base,
        task_model=config.task_model,
        readme_model=config.readme_model,
    )
    options = InitOptions(idea=args.idea, name=args.name, stack=args.stack, readme=bool(args.readme))

    result = run_init(options, config, github=github, llm=llm)
    report = result.report
    for title, error in report.failed:
        print(f"Failed to create issue {title!r}: {error}")
    if report.ok:
        print(f"Filed {len(report.created)} issue(s)")
    else:
        print(f"Filed {len(report.created)} issue(s), {len(report.failed)} failed")
    print(f"✅ Project setup complete: {result.repo.full_name}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="aiagent", description="Bootstrap a GitHub project from an idea using AI")
    sub = p.add_subparsers(dest="command", required=True)

    i = sub.add_parser(
        "init",
        help="Create a GitHub repo and file AI-generated tasks as issues",
        epilog='Example: aiagent init "Pomodoro timer web app" --name pomodoro-timer --stack "Go, SQLite, React"',
    )
    i.add_argument("idea", help="One-line description of the project")
    i.add_argument("-n", "--name", default=None, help="Custom name for the GitHub repository")
    i.add_argument("-s", "--stack", default=None, help="Tech stack (e.g. 'Go, PostgreSQL, React')")

    i.add_argument("--readme", dest="readme", action="store_true", default=True, help="Generate and commit a README (default)")
    i.add_argument("--no-readme", dest="readme", action="store_false", help="Skip README generation")
    i.add_argument("--private", dest="private", action="store_true", default=None, help="Create a private repo")
    i.add_argument("--public", dest="private", action="store_false", default=None, help="Create a public repo")
    i.add_argument(
        "--no-auto-init",
        dest="auto_init",
        action="store_false",
        default=None,
        help="Create the repo without an initial commit",
    )

    i.add_argument("--config", default=None, help="Path to a YAML config file")
    i.add_argument("--log-level", default=None, help="Log level (default: INFO or AIAGENT_LOG_LEVEL)")
    i.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")

    i.set_defaults(func=init_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except AgentError as e:
        log.error("init_failed", error=str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
