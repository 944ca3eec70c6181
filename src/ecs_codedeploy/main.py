import logging
import logging.config
import sys

import click
import yaml
from botocore.exceptions import BotoCoreError, ClientError

from . import VERSION
from .appspec import create_appspec, write_appspec
from .config import APPSPEC_FILENAME, TASK_DEF_FILENAME, DeployConfig
from .ecs_client import DeployError, ECSClient
from .task_definition import (create_new_task_definition,
                              read_task_definition, write_task_definition)

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

EXAMPLE = """Example with all arguments:

\b
  ecs-codedeploy \\
    --cluster production \\
    --service backend \\
    --container-port 3000 \\
    --codedeploy-application backend_app \\
    --codedeploy-deployment-group backend_app_dg \\
    --image 123456789000.dkr.ecr.us-east-1.amazonaws.com/api:1.2.0 \\
    --appspec-file appspec.yaml \\
    --task-definition-file task-definition.json
"""


def configure_logging(level):
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
        },
        'handlers': {
            'default': {
                'formatter': 'standard',
                'class': 'logging.StreamHandler',
                'stream': 'ext://sys.stderr',
            },
        },
        'loggers': {
            'ecs_codedeploy': {
                'handlers': ['default'],
                'level': level.upper(),
                'propagate': False
            },
        },
    })


class DeployCommand(click.Command):
    """ Reports every usage error (missing or empty option, unknown flag,
        bad value) with exit code 1
    """

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


# pylint: disable=unused-argument
def _not_empty(ctx, param, value):
    if value is not None and not value.strip():
        raise click.BadParameter('cannot be empty')
    return value


def _echo_poll_step(step):
    click.echo('waiting for deployment to finish...')
    return step


def run_deployment(ecs_client, config):
    """ Resolves the task definition, writes the task definition and AppSpec
        files and starts the CodeDeploy deployment.
    """
    click.echo('Cluster: %s' % config.cluster)
    click.echo('Service: %s' % config.service)
    click.echo('Image: %s' % config.image)
    click.echo('')

    task_definition = None
    if config.task_definition_file is None:
        click.echo('Getting latest task definition for the service %s'
                   % config.service)
        task_definition_arn = ecs_client.get_task_definition_arn(
            config.cluster, config.service)
        if task_definition_arn is None:
            raise DeployError('No matching service %s found for cluster %s'
                              % (config.service, config.cluster))
        click.echo('Task definition ARN: %s' % task_definition_arn)
        click.echo('')

        click.echo('Create new task definition')
        task_definition = create_new_task_definition(
            ecs_client.describe_task_definition(task_definition_arn),
            config.image,
            config.container_images,
            config.iam_role)
        click.echo('Created')
        click.echo('')

        task_definition_file = config.task_definition_output
        click.echo('Create file %s' % task_definition_file)
        write_task_definition(task_definition, task_definition_file)
        click.echo('Created')
        click.echo('')
    else:
        task_definition_file = config.task_definition_file
        click.echo("Using local task definition '%s' for the service %s"
                   % (task_definition_file, config.service))

    if config.appspec_file is None:
        if task_definition is None:
            task_definition = read_task_definition(task_definition_file)
        appspec_file = config.appspec_output
        click.echo('Create file %s' % appspec_file)
        write_appspec(create_appspec(task_definition,
                                     config.container_port,
                                     config.container_name),
                      appspec_file)
        click.echo('Created')
        click.echo('')
    else:
        appspec_file = config.appspec_file
        click.echo("Using local appspec file '%s'" % appspec_file)

    click.echo('Deploy ECS service')
    task_definition_arn, deployment_id = ecs_client.deploy(
        config.cluster,
        config.service,
        task_definition_file,
        appspec_file,
        config.codedeploy_application,
        config.codedeploy_deployment_group)
    click.echo('Registered task definition: %s' % task_definition_arn)
    click.echo('Deployment id: %s' % deployment_id)

    if config.wait:
        if not ecs_client.wait_for_deployment(deployment_id,
                                              step_function=_echo_poll_step):
            raise DeployError('Deployment %s did not succeed' % deployment_id)

    click.echo('Done!')
    return deployment_id


@click.command('ecs-codedeploy', cls=DeployCommand, epilog=EXAMPLE,
               context_settings=dict(max_content_width=120))
@click.version_option(version=VERSION, prog_name='ecs-codedeploy')
@click.option('--cluster', required=True, callback=_not_empty,
              help='Name of ECS Cluster')
@click.option('--service', required=True, callback=_not_empty,
              help='Name of ECS Service to update')
@click.option('--image', required=True, callback=_not_empty,
              help='Image ID to deploy to every container '
                   '(eg, 123456789000.dkr.ecr.us-east-1.amazonaws.com/backend:v1.2.3)')
@click.option('--container-image', type=(str, str), multiple=True,
              help='Overwrites the image for a single container: <container> <image>')
@click.option('--codedeploy-application', required=True, callback=_not_empty,
              help='Name of CodeDeploy Application')
@click.option('--codedeploy-deployment-group', required=True,
              callback=_not_empty,
              help='Name of CodeDeploy Deployment Group')
@click.option('--container-port', required=True,
              type=click.IntRange(1, 65535), help='Container Port Number')
@click.option('--container-name', required=False,
              help='Container receiving load balancer traffic. Defaults to the first container')
@click.option('--task-definition-file', required=False,
              type=click.Path(exists=True, dir_okay=False),
              help='Local task definition file to use')
@click.option('--appspec-file', required=False,
              type=click.Path(exists=True, dir_okay=False),
              help='Local AppSpec file to use')
@click.option('--task-definition-output', default=TASK_DEF_FILENAME,
              show_default=True,
              help='File to write the new task definition to')
@click.option('--appspec-output', default=APPSPEC_FILENAME, show_default=True,
              help='File to write the generated AppSpec to')
@click.option('--iam-role', required=False,
              help='Task role ARN to set on the new task definition')
@click.option('--wait', is_flag=True, default=False,
              help='Wait for the deployment to finish. Defaults to false.')
@click.option('--timeout', type=click.IntRange(min=1), default=600,
              show_default=True,
              help='Seconds to wait for the deployment when --wait is given')
@click.option('--region', required=False, help='AWS region (e.g. eu-central-1)')
@click.option('--profile', required=False, help='AWS configuration profile name')
@click.option('--log-level', default='WARNING', show_default=True,
              type=click.Choice(LOG_LEVELS, case_sensitive=False))
def cli(cluster, service, image, container_image, codedeploy_application,
        codedeploy_deployment_group, container_port, container_name,
        task_definition_file, appspec_file, task_definition_output,
        appspec_output, iam_role, wait, timeout, region, profile, log_level):
    """
    Deploy a new image to an ECS service through a CodeDeploy blue/green
    deployment.
    """
    configure_logging(log_level)

    config = DeployConfig(
        cluster=cluster,
        service=service,
        image=image,
        container_images=dict(container_image),
        codedeploy_application=codedeploy_application,
        codedeploy_deployment_group=codedeploy_deployment_group,
        container_port=container_port,
        container_name=container_name,
        task_definition_file=task_definition_file,
        appspec_file=appspec_file,
        task_definition_output=task_definition_output,
        appspec_output=appspec_output,
        iam_role=iam_role,
        wait=wait,
        timeout=timeout,
    )

    try:
        ecs_client = ECSClient(timeout=config.timeout, region=region,
                               profile=profile)
        run_deployment(ecs_client, config)
    except (ClientError, BotoCoreError, DeployError, ValueError,
            yaml.YAMLError, OSError) as e:
        logger.debug('Deployment aborted', exc_info=True)
        click.echo('Error: %s' % e, err=True)
        sys.exit(1)
    except KeyError as e:
        logger.debug('Deployment aborted', exc_info=True)
        click.echo('Error: missing field %s' % e, err=True)
        sys.exit(1)
