from collections import namedtuple

TASK_DEF_FILENAME = 'task_def.json'
APPSPEC_FILENAME = 'appspec_ecs.yaml'

DeployConfig = namedtuple('DeployConfig', [
    'cluster',
    'service',
    'image',
    'container_images',
    'codedeploy_application',
    'codedeploy_deployment_group',
    'container_port',
    'container_name',
    'task_definition_file',
    'appspec_file',
    'task_definition_output',
    'appspec_output',
    'iam_role',
    'wait',
    'timeout',
])
