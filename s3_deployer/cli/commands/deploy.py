"""Deploy, stage, switch and rollback commands"""

import click

from ..decorators import with_deployer
from ..utils.output import (
    format_deploy_result,
    format_stage_result,
    format_switch_result,
)
from ...constants import ENV_REVISION, MSG_BLANK_REVISION
from ...api.exceptions import InvalidRevisionError


def _revision_argument(required: bool = False):
    return click.argument('revision', required=required, envvar=ENV_REVISION)


@click.command()
@_revision_argument()
@with_deployer
def deploy(deployer, revision):
    """Stage the build directory and make it live

    REVISION defaults to the current time (YYYYMMDDHHMMSS).

    Examples:

        # Deploy under a fresh revision
        s3-deployer deploy

        # Deploy under an explicit revision
        s3-deployer deploy 20240120093000
    """
    result = deployer.deploy(revision or None)
    format_deploy_result(result)


@click.command()
@_revision_argument()
@with_deployer
def stage(deployer, revision):
    """Upload the build directory without making it live

    Examples:

        s3-deployer stage

        REVISION=20240120093000 s3-deployer stage
    """
    result = deployer.stage(revision or None)
    format_stage_result(result)


@click.command()
@_revision_argument()
@with_deployer
def switch(deployer, revision):
    """Make a staged revision live

    REVISION is a revision identifier or a prefix of the commit id it was
    built from.

    Examples:

        s3-deployer switch 20240120093000

        s3-deployer switch 3f2a9c1

    To notify another service once the switch is done, add an
    after_switch hook to .s3-deployer.yaml:

    \b
        hooks:
          after_switch: curl -fsS -X POST -d "revision=$S3_DEPLOYER_TO_REVISION" https://app.example.com/revision
    """
    if not revision or not revision.strip():
        raise InvalidRevisionError(MSG_BLANK_REVISION)

    result = deployer.switch(revision)
    format_switch_result(result)


@click.command()
@_revision_argument()
@with_deployer
def rollback(deployer, revision):
    """Switch back to an older revision

    Without REVISION, switches to the revision staged just before the
    current one.

    Examples:

        s3-deployer rollback

        s3-deployer rollback 20240119170000
    """
    if revision is not None and not revision.strip():
        raise InvalidRevisionError(MSG_BLANK_REVISION)

    result = deployer.rollback(revision)
    format_switch_result(result)
