import hashlib
import json
import logging

import boto3
import polling

from . import appspec
from .task_definition import read_task_definition

logger = logging.getLogger(__name__)

DEPLOYMENT_SUCCEEDED = 'Succeeded'
DEPLOYMENT_FAILED_STATUSES = ('Failed', 'Stopped')


class DeployError(Exception):
    pass


class ECSClient:
    """
    Abstraction of the boto ecs and codedeploy clients
    """

    def __init__(self, timeout=600, region=None, profile=None):
        if region or profile:
            session = boto3.session.Session(region_name=region,
                                            profile_name=profile)
        else:
            session = boto3
        self.ecs_client = session.client('ecs')
        self.codedeploy_client = session.client('codedeploy')
        self.timeout = timeout

    def get_service(self, cluster_name, service_name):
        """ Returns the service object matching the service name or ARN
        """
        logger.debug('describe_services cluster=%s service=%s',
                     cluster_name, service_name)
        response = self.ecs_client.describe_services(cluster=cluster_name,
                                                     services=[service_name])
        if response is None or not response.get('services'):
            return None
        return response['services'][0]

    def get_task_definition_arn(self, cluster_name, service_name):
        """ Returns the ARN of the task definition the service is running
        """
        service = self.get_service(cluster_name, service_name)
        if service is not None:
            return service['taskDefinition']
        return None

    def describe_task_definition(self, task_definition_arn):
        logger.debug('describe_task_definition %s', task_definition_arn)
        response = self.ecs_client.describe_task_definition(
            taskDefinition=task_definition_arn)
        if response is None or 'taskDefinition' not in response:
            raise DeployError(
                'Task definition %s not found' % task_definition_arn)
        return response['taskDefinition']

    def register_task_definition(self, register_kwargs):
        logger.debug('register_task_definition family=%s',
                     register_kwargs.get('family'))
        response = self.ecs_client.register_task_definition(**register_kwargs)
        return response['taskDefinition']['taskDefinitionArn']

    def get_deployment_group(self, application_name, deployment_group_name):
        logger.debug('get_deployment_group application=%s group=%s',
                     application_name, deployment_group_name)
        response = self.codedeploy_client.get_deployment_group(
            applicationName=application_name,
            deploymentGroupName=deployment_group_name)
        return response['deploymentGroupInfo']

    def validate_deployment_group(self, cluster_name, service_name,
                                  application_name, deployment_group_name):
        """ Makes sure the deployment group targets the given cluster and
            service. Names and ARNs are both accepted for cluster and service.
        """
        group = self.get_deployment_group(application_name,
                                          deployment_group_name)
        for target in group.get('ecsServices', []):
            if _name_matches(target['clusterName'], cluster_name) \
                    and _name_matches(target['serviceName'], service_name):
                return group

        raise DeployError(
            'Deployment group %s of application %s does not target service '
            '%s in cluster %s' % (deployment_group_name, application_name,
                                  service_name, cluster_name))

    def create_deployment(self, application_name, deployment_group_name,
                          appspec_content):
        """ Starts a CodeDeploy deployment from an AppSpec document and
            returns the deployment id
        """
        content = json.dumps(appspec_content)
        sha256 = hashlib.sha256(content.encode('utf-8')).hexdigest()
        logger.debug('create_deployment application=%s group=%s',
                     application_name, deployment_group_name)
        response = self.codedeploy_client.create_deployment(
            applicationName=application_name,
            deploymentGroupName=deployment_group_name,
            revision={
                'revisionType': 'AppSpecContent',
                'appSpecContent': {
                    'content': content,
                    'sha256': sha256,
                },
            })
        return response['deploymentId']

    def deploy(self, cluster_name, service_name, task_definition_file,
               appspec_file, application_name, deployment_group_name):
        """ Registers the task definition found in task_definition_file and
            starts a blue/green deployment with the AppSpec found in
            appspec_file, its task definition placeholder replaced by the
            newly registered revision.
        """
        self.validate_deployment_group(cluster_name, service_name,
                                       application_name,
                                       deployment_group_name)

        task_definition_arn = self.register_task_definition(
            read_task_definition(task_definition_file))

        content = appspec.set_task_definition(
            appspec.read_appspec(appspec_file), task_definition_arn)

        deployment_id = self.create_deployment(application_name,
                                               deployment_group_name,
                                               content)
        return task_definition_arn, deployment_id

    def get_deployment_status(self, deployment_id):
        response = self.codedeploy_client.get_deployment(
            deploymentId=deployment_id)
        return response['deploymentInfo']['status']

    def wait_for_deployment(self, deployment_id, step_function=None):
        """ Blocks until the deployment reaches a final state. Returns True
            if it succeeded, False if it failed, was stopped or timed out.
        """
        statuses = []

        def _check():
            status = self.get_deployment_status(deployment_id)
            statuses.append(status)
            return status == DEPLOYMENT_SUCCEEDED \
                or status in DEPLOYMENT_FAILED_STATUSES

        try:
            polling.poll(
                _check,
                step=5,
                step_function=step_function or polling.step_constant,
                timeout=self.timeout
            )
        except polling.PollingException:
            logger.warning('Timed out waiting for deployment %s',
                           deployment_id)
            return False

        return statuses[-1] == DEPLOYMENT_SUCCEEDED


def _name_matches(name, name_or_arn):
    return name == name_or_arn or name == name_or_arn.rsplit('/', 1)[-1]
