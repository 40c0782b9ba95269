from setuptools import setup, find_packages

package_name = 'robot_task_composer'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(include=[package_name, f"{package_name}.*"]),
    data_files=[
        ('share/ament_index/resource_index/packages',
         ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        ('share/' + package_name + '/launch', ['launch/composer.launch.py']),
    ],
    install_requires=['setuptools'],
    extras_require={
        'test': ['pytest'],
    },
    tests_require=['pytest'],
    zip_safe=True,
    maintainer='You',
    maintainer_email='puneettu664@gmail.com',
    description='Cooperative task/state composition for robot control loops',
    license='Apache-2.0',
    entry_points={
        'console_scripts': [
            'node = robot_task_composer.node:main',
        ],
    },
)
