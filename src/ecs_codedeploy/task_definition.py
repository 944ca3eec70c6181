import copy
import json

# Kept from the source definition whenever present
DEFAULT_FIELDS = ('executionRoleArn', 'family', 'volumes',
                  'containerDefinitions', 'placementConstraints')

# Only carried over if the source definition declares them
CONDITIONAL_FIELDS = ('networkMode', 'taskRoleArn', 'placementConstraints')

FARGATE_FIELDS = ('executionRoleArn', 'requiresCompatibilities', 'cpu',
                  'memory')

LAUNCH_TYPE_FARGATE = 'FARGATE'


def is_fargate(task_definition):
    return LAUNCH_TYPE_FARGATE in (
        task_definition.get('requiresCompatibilities') or [])


def _container_names(container_definitions):
    if not isinstance(container_definitions, list) \
            or not all(isinstance(c, dict) for c in container_definitions):
        raise ValueError('containerDefinitions must be a list of objects')
    return [c.get('name') for c in container_definitions]


def _unknown_container_error(container_name, names):
    return ValueError('Container %s not found in task definition, '
                      'available: %s' % (container_name,
                                         ', '.join(str(n) for n in names)))


def set_images(container_definitions, image, container_images=None):
    """ Overwrites the image of every container. A container listed in
        container_images gets its own image instead.
    """
    container_images = container_images or {}
    names = _container_names(container_definitions)
    for container_name in container_images:
        if container_name not in names:
            raise _unknown_container_error(container_name, names)

    for container in container_definitions:
        container['image'] = container_images.get(container.get('name'), image)
    return container_definitions


def create_new_task_definition(task_definition, image, container_images=None,
                               task_role_arn=None):
    """ Builds the definition to register from the one currently deployed.

        Only the fields ECS accepts on registration are kept, and only when
        the source declares them. The source dict is left untouched.
    """
    fields = list(DEFAULT_FIELDS)
    fields.extend(f for f in CONDITIONAL_FIELDS if f not in fields)
    if is_fargate(task_definition):
        fields.extend(f for f in FARGATE_FIELDS if f not in fields)

    new_task_definition = {}
    for field in fields:
        if task_definition.get(field) is not None:
            new_task_definition[field] = copy.deepcopy(task_definition[field])

    set_images(new_task_definition['containerDefinitions'], image,
               container_images)

    if task_role_arn:
        new_task_definition['taskRoleArn'] = task_role_arn

    return new_task_definition


def get_container_name(task_definition, container_name=None):
    """ Returns the name of the container receiving load balancer traffic,
        the first one unless container_name is given.
    """
    names = _container_names(task_definition['containerDefinitions'])
    if container_name is None:
        if not names:
            raise ValueError('Task definition has no container definitions')
        return names[0]
    if container_name not in names:
        raise _unknown_container_error(container_name, names)
    return container_name


def render_task_definition(task_definition):
    return json.dumps(task_definition, indent=2) + '\n'


def write_task_definition(task_definition, path):
    with open(path, 'w') as f:
        f.write(render_task_definition(task_definition))


def read_task_definition(path):
    with open(path) as f:
        task_definition = json.load(f)
    if not isinstance(task_definition, dict):
        raise ValueError('Task definition file %s is not a JSON object' % path)
    return task_definition
