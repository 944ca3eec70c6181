import json

import yaml

from .task_definition import get_container_name

APPSPEC_VERSION = 1
PLATFORM_VERSION = '1.4.0'
TASK_DEFINITION_PLACEHOLDER = 'PlaceholderForTaskDefinition'


def create_appspec(task_definition, container_port, container_name=None):
    """ Builds a CodeDeploy AppSpec routing traffic to container_port of the
        task definition's container. CodeDeploy swaps the placeholder for the
        registered task definition at deploy time.
    """
    return {
        'version': APPSPEC_VERSION,
        'Resources': [{
            'TargetService': {
                'Type': 'AWS::ECS::Service',
                'Properties': {
                    'TaskDefinition': TASK_DEFINITION_PLACEHOLDER,
                    'LoadBalancerInfo': {
                        'ContainerName': get_container_name(task_definition,
                                                            container_name),
                        'ContainerPort': int(container_port),
                    },
                    'PlatformVersion': PLATFORM_VERSION,
                },
            },
        }],
    }


def render_appspec(content):
    return yaml.safe_dump(content, explicit_start=True,
                          default_flow_style=False, sort_keys=False)


def write_appspec(content, path):
    with open(path, 'w') as f:
        f.write(render_appspec(content))


def read_appspec(path):
    with open(path) as f:
        text = f.read()
    try:
        content = json.loads(text)
    except ValueError:
        content = yaml.safe_load(text)
    if not isinstance(content, dict):
        raise ValueError('AppSpec file %s is not a mapping' % path)
    return content


def set_task_definition(content, task_definition_arn):
    """ Points every ECS target service of the AppSpec at
        task_definition_arn. Returns the updated document.
    """
    resources = content.get('Resources') or []
    if not isinstance(resources, list):
        raise ValueError('AppSpec Resources must be a list')
    for resource in resources:
        if not isinstance(resource, dict):
            raise ValueError('AppSpec resource %r is not a mapping'
                             % (resource,))
        for target in resource.values():
            if not isinstance(target, dict) \
                    or target.get('Type') != 'AWS::ECS::Service':
                continue
            target.setdefault('Properties', {})['TaskDefinition'] = \
                task_definition_arn
    return content
