import copy

import pytest

TASK_DEFINITION_ARN = 'arn:aws:ecs:us-east-1:123456789000:task-definition/web:7'
NEW_TASK_DEFINITION_ARN = 'arn:aws:ecs:us-east-1:123456789000:task-definition/web:8'

FARGATE_TASK_DEFINITION = {
    'taskDefinitionArn': TASK_DEFINITION_ARN,
    'family': 'web',
    'revision': 7,
    'status': 'ACTIVE',
    'executionRoleArn': 'arn:aws:iam::123456789000:role/ecsTaskExecutionRole',
    'containerDefinitions': [{
        'name': 'web',
        'image': 'repo/img:1.0',
        'essential': True,
        'portMappings': [{'containerPort': 8080, 'protocol': 'tcp'}],
    }],
    'volumes': [],
    'placementConstraints': [],
    'compatibilities': ['EC2', 'FARGATE'],
    'requiresCompatibilities': ['FARGATE'],
    'requiresAttributes': [{'name': 'ecs.capability.execution-role-awslogs'}],
    'cpu': '256',
    'memory': '512',
}

EC2_TASK_DEFINITION = {
    'taskDefinitionArn': TASK_DEFINITION_ARN,
    'family': 'api',
    'revision': 3,
    'status': 'ACTIVE',
    'taskRoleArn': 'arn:aws:iam::123456789000:role/api',
    'networkMode': 'bridge',
    'containerDefinitions': [
        {'name': 'api', 'image': 'repo/api:1.0', 'memory': 256,
         'portMappings': [{'containerPort': 3000, 'hostPort': 0}]},
        {'name': 'sidecar', 'image': 'repo/sidecar:1.0', 'memory': 64},
        {'name': 'logger', 'image': 'repo/logger:1.0', 'memory': 64},
    ],
    'volumes': [{'name': 'data', 'host': {'sourcePath': '/data'}}],
    'placementConstraints': [{'type': 'memberOf',
                              'expression': 'attribute:env == prod'}],
    'compatibilities': ['EC2'],
    'requiresCompatibilities': ['EC2'],
}


@pytest.fixture
def fargate_task_definition():
    return copy.deepcopy(FARGATE_TASK_DEFINITION)


@pytest.fixture
def ec2_task_definition():
    return copy.deepcopy(EC2_TASK_DEFINITION)


@pytest.fixture
def in_tmp_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path
