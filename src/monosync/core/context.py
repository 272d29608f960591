"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from monosync.core.config import SyncConfig, load_sync_config
from monosync.core.relationships import RelationshipDirectory
from monosync.gateway.commit_copier.abc import CommitCopier
from monosync.gateway.github.gateway import GitHubGateway, create_real_github_gateway
from monosync.gateway.time.real import RealTime


@dataclass(frozen=True)
class SyncContext:
    """Immutable context holding all dependencies for sync operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    github: GitHubGateway
    commit_copier: CommitCopier
    relationships: RelationshipDirectory
    config: SyncConfig

    @staticmethod
    def for_test(
        github: GitHubGateway | None = None,
        commit_copier: CommitCopier | None = None,
        relationships: RelationshipDirectory | None = None,
        config: SyncConfig | None = None,
    ) -> "SyncContext":
        """Create test context with optional pre-configured gateways.

        Unspecified gateways default to empty fakes. When `relationships` is
        omitted the directory is built from `config.relationships`.

        Example:
            >>> pr = FakeGitHubPrGateway(prs=[parent_pr])
            >>> ctx = SyncContext.for_test(
            ...     github=create_fake_github_gateway(pr=pr),
            ...     config=SyncConfig.for_test(relationships=(edge,)),
            ... )
        """
        from monosync.gateway.commit_copier.fake import FakeCommitCopier
        from monosync.gateway.github.gateway import create_fake_github_gateway

        resolved_config = config if config is not None else SyncConfig.for_test()
        return SyncContext(
            github=github if github is not None else create_fake_github_gateway(),
            commit_copier=commit_copier if commit_copier is not None else FakeCommitCopier(),
            relationships=(
                relationships
                if relationships is not None
                else resolved_config.build_directory()
            ),
            config=resolved_config,
        )


def create_context(*, config_path: Path) -> SyncContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Raises:
        ValueError: If the config file is malformed
    """
    from monosync.gateway.commit_copier.real import RealCommitCopier

    config = load_sync_config(config_path)
    return SyncContext(
        github=create_real_github_gateway(RealTime()),
        commit_copier=RealCommitCopier(
            config.work_dir,
            committer_name=config.committer_name,
            committer_email=config.committer_email,
        ),
        relationships=config.build_directory(),
        config=config,
    )
